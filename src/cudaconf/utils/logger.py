from __future__ import annotations

import logging
import os

_FORMAT = "%(levelname)s %(name)s: %(message)s"
_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    root = logging.getLogger("cudaconf")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    root.setLevel(os.environ.get("CUDACONF_LOG_LEVEL", "INFO").upper())
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the ``cudaconf`` hierarchy, configuring it once."""
    _configure_root()
    return logging.getLogger(name)
