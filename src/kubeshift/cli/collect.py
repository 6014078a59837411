# src/kubeshift/cli/collect.py
"""
Implements the `collect` command for the kubeshift CLI.
"""

import asyncio
import json
import logging
import traceback
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from ..collectors.resource_collector import ResourceCollector
from ..core.exceptions import KubeShiftError
from ..exporters.json_exporter import JSONExporter
from ..models.application_clone import ApplicationClone
from ..reporters.console_reporter import ConsoleReporter
from .utils import parse_label_selectors

logger = logging.getLogger(__name__)

app = typer.Typer(help="Collect the resources of one or more namespaces.", add_completion=False)


def load_clone_spec(path: Path) -> ApplicationClone:
    """Reads an ApplicationClone manifest (JSON) from disk."""
    try:
        manifest = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise typer.BadParameter(f"Could not read clone spec '{path}': {e}")
    try:
        return ApplicationClone.from_manifest(manifest)
    except ValidationError as e:
        raise typer.BadParameter(f"Invalid clone spec '{path}': {e}")


@app.callback(invoke_without_command=True)
def collect(
    ctx: typer.Context,
    namespace: Annotated[
        Optional[List[str]],
        typer.Option("--namespace", "-n", help="Namespace to collect from. Repeat for several namespaces."),
    ] = None,
    selector: Annotated[
        Optional[List[str]],
        typer.Option("--selector", "-l", help="Label selector 'key=value'. Repeat to AND several labels."),
    ] = None,
    clone_spec: Annotated[
        Optional[Path],
        typer.Option(
            "--clone-spec",
            help="ApplicationClone manifest (JSON) providing source namespaces and selectors.",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    output_path: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the collected resources to this JSON file."),
    ] = None,
    raw: Annotated[
        bool,
        typer.Option("--raw", help="Skip sanitization and keep status and cluster-assigned metadata."),
    ] = False,
):
    """
    Collect the resources of the given namespaces, ready for re-creation elsewhere.
    """
    if ctx.invoked_subcommand is not None:
        return

    namespaces = list(namespace or [])
    label_selectors = parse_label_selectors(selector)
    if clone_spec is not None:
        clone = load_clone_spec(clone_spec)
        namespaces.extend(ns for ns in clone.source_namespaces if ns not in namespaces)
        # Explicit selectors take precedence over the clone's
        label_selectors = {**clone.spec.selectors, **label_selectors}

    if not namespaces:
        raise typer.BadParameter("At least one --namespace (or a --clone-spec) is required.")

    async def _collect_async():
        collector = ResourceCollector()
        try:
            await collector.init()
            resources = await collector.get_resources(namespaces, label_selectors, prepare=not raw)
        finally:
            await collector.close()

        ConsoleReporter().report(resources)
        if output_path is not None:
            written = await JSONExporter().export(resources, str(output_path))
            typer.echo(f"Wrote {len(resources)} resource(s) to {written}")

    try:
        asyncio.run(_collect_async())
    except KubeShiftError as e:
        logger.error(f"Collection failed: {e}")
        logger.debug("Collection failed: %s", traceback.format_exc())
        raise typer.Exit(code=1)
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        raise typer.Exit(code=1)
