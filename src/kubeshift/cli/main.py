# src/kubeshift/cli/main.py
"""
Entry point of the kubeshift CLI.

Wires the `collect` sub-app and the `backup-location` and `version` commands
onto one Typer application.
"""

import logging
from typing import Optional

import typer
from typing_extensions import Annotated

from ..core.config import VALID_LOG_LEVELS, config
from . import backup_location, collect

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)


setup_logging(config.LOG_LEVEL)
logger = logging.getLogger(__name__)


app = typer.Typer(
    name="kubeshift",
    help="Collect and sanitize Kubernetes resources for migration, cloning and backup.",
    add_completion=False,
)


def _echo_version():
    from .. import __version__

    typer.echo(f"kubeshift version: {__version__}")


def version_callback(value: bool):
    if value:
        _echo_version()
        raise typer.Exit()


@app.command()
def version():
    """
    Show the version of kubeshift.
    """
    _echo_version()


@app.callback()
def main(
    show_version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit."),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Override LOG_LEVEL for this run (DEBUG, INFO, WARNING...)."),
    ] = None,
):
    """
    kubeshift: snapshot the objects of an application's namespaces.
    """
    if log_level:
        if log_level.upper() not in VALID_LOG_LEVELS:
            raise typer.BadParameter(f"Unknown log level '{log_level}'.", param_hint="--log-level")
        setup_logging(log_level)
        logger.debug("Log level set to %s", log_level.upper())


app.add_typer(collect.app, name="collect")
app.command(name="backup-location")(backup_location.backup_location)


if __name__ == "__main__":
    app()
