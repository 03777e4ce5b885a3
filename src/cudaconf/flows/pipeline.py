from __future__ import annotations

from pathlib import Path

from prefect import flow, get_run_logger, task

from cudaconf.config import CommitResult, Configuration, Settings, resolve_and_commit
from cudaconf.resolver import resolve_toolchain


@task
def load_settings() -> Settings:
    logger = get_run_logger()
    settings = Settings.from_env()
    if settings.pinned_version is not None:
        logger.info(f"CUDA version pinned to {settings.pinned_version}")
    if not settings.use_artifacts:
        logger.info("CUDA artifacts disabled; only local installations will be considered")
    return settings


@task
def resolve_configuration(settings: Settings) -> Configuration:
    logger = get_run_logger()
    toolchain = resolve_toolchain(settings)
    logger.info(
        f"Resolved CUDA {toolchain.toolkit.version} (driver {toolchain.driver_release}, "
        f"LLVM {toolchain.backend_version}): {toolchain.support}"
    )
    return toolchain.to_configuration()


@flow(name="cudaconf-toolchain-resolution")
def toolchain_resolution_flow(config_path: str | None = None) -> CommitResult:
    """
    Orchestrates one configuration pass:
    settings -> backend support -> CUDA support -> intersection -> commit
    """
    logger = get_run_logger()
    settings = load_settings()
    path = Path(config_path or settings.config_path)
    result = resolve_and_commit(path, lambda: resolve_configuration(settings))
    if result.changed:
        logger.info(f"Configuration written to {path}")
    else:
        logger.info(f"Configuration at {path} is up to date")
    return result
