# src/kubeshift/cli/backup_location.py
"""
Implements the `backup-location` command: shows a BackupLocation with the
credentials from its secret merged in (and masked).
"""

import asyncio
import json
import logging

import typer
from kubernetes_asyncio import client
from kubernetes_asyncio.client.rest import ApiException
from typing_extensions import Annotated

from ..core.exceptions import BackupLocationError, KubeShiftError
from ..core.k8s_client import CONNECTION_ERRORS, api_client_session
from ..models.backup_location import (
    BACKUP_LOCATION_GROUP,
    BACKUP_LOCATION_PLURAL,
    BACKUP_LOCATION_VERSION,
    BackupLocation,
)

logger = logging.getLogger(__name__)


async def fetch_backup_location(api_client: client.ApiClient, name: str, namespace: str) -> BackupLocation:
    """Reads a BackupLocation custom resource and resolves its secret."""
    try:
        manifest = await client.CustomObjectsApi(api_client).get_namespaced_custom_object(
            BACKUP_LOCATION_GROUP, BACKUP_LOCATION_VERSION, namespace, BACKUP_LOCATION_PLURAL, name
        )
    except ApiException as e:
        raise BackupLocationError(f"Error getting BackupLocation {namespace}/{name}: {e.status} {e.reason}") from e
    except CONNECTION_ERRORS as e:
        raise BackupLocationError(f"Error getting BackupLocation {namespace}/{name}: {e!r}") from e

    location = BackupLocation.from_manifest(manifest)
    await location.update_from_secret(client.CoreV1Api(api_client))
    return location


def backup_location(
    name: Annotated[str, typer.Argument(help="Name of the BackupLocation.")],
    namespace: Annotated[str, typer.Option("--namespace", "-n", help="Namespace of the BackupLocation.")] = "default",
):
    """
    Show a BackupLocation with its credentials resolved and masked.
    """

    async def _show_async():
        async with api_client_session() as api_client:
            location = await fetch_backup_location(api_client, name, namespace)
        typer.echo(json.dumps(location.redacted(), indent=2))

    try:
        asyncio.run(_show_async())
    except KubeShiftError as e:
        logger.error(f"Failed to resolve backup location: {e}")
        raise typer.Exit(code=1)
