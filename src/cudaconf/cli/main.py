from __future__ import annotations

from typing import NoReturn, Optional

import typer

from cudaconf.config import load
from cudaconf.config.settings import DEFAULT_CONFIG_PATH, Settings
from cudaconf.errors import ResolutionError
from cudaconf.flows.pipeline import toolchain_resolution_flow
from cudaconf.resolver import ResolvedToolchain
from cudaconf.support import verlist

app = typer.Typer(help="cudaconf: CUDA toolchain discovery")

UNAVAILABLE_NOTE = (
    "This is not a fatal error, but GPU functionality will be unavailable.\n"
    "If you expected this to work, check your CUDA driver and toolkit installation."
)


def _fail(ex: ResolutionError) -> NoReturn:
    typer.echo(f"error: {ex} [{ex.code}]", err=True)
    typer.echo(UNAVAILABLE_NOTE, err=True)
    raise typer.Exit(code=1)


def _summary(toolchain: ResolvedToolchain) -> str:
    toolkit = toolchain.toolkit
    lines = [
        f"CUDA toolkit {toolkit.version} ({toolkit.source}) at {', '.join(toolkit.dirs)}",
        f"CUDA driver {toolchain.driver_release}, LLVM {toolchain.backend_version}",
        f"Device capabilities: {verlist(toolchain.support.targets)}",
        f"PTX ISAs: {verlist(toolchain.support.isas)}",
    ]
    for name, path in toolkit.paths.items():
        lines.append(f"  {name}: {path if path is not None else '(unavailable)'}")
    return "\n".join(lines)


def _config_path(config: Optional[str]) -> str:
    if config:
        return config
    try:
        return Settings.from_env().config_path
    except ResolutionError:
        return DEFAULT_CONFIG_PATH


@app.command()
def resolve(config: Optional[str] = typer.Option(None, help="Path of the configuration store")) -> None:
    """
    Resolve the CUDA toolchain and persist it, leaving the store untouched
    when nothing changed.
    """
    try:
        result = toolchain_resolution_flow(config_path=config)
        toolchain = ResolvedToolchain.from_configuration(result.config)
    except ResolutionError as ex:
        _fail(ex)
    typer.echo(_summary(toolchain))
    typer.echo("Configuration updated." if result.changed else "Configuration unchanged.")


@app.command()
def show(config: Optional[str] = typer.Option(None, help="Path of the configuration store")) -> None:
    """Print the persisted toolchain configuration."""
    path = _config_path(config)
    try:
        stored = load(path)
        if stored is None:
            raise ResolutionError(f"No configuration at {path}; run `cudaconf resolve` first")
        toolchain = ResolvedToolchain.from_configuration(stored)
    except ResolutionError as ex:
        _fail(ex)
    typer.echo(_summary(toolchain))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
