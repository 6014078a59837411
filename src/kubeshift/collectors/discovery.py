# src/kubeshift/collectors/discovery.py
"""
API discovery for the resource collector.

Lists the server's preferred group/versions and, for each of them, the
resource kinds that can be listed and re-created.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from kubernetes_asyncio import client
from kubernetes_asyncio.client.rest import ApiException

from ..core.exceptions import DiscoveryError, KubeShiftError
from ..core.k8s_client import CONNECTION_ERRORS
from ..models.resource import APIResourceGroup, KindDescriptor
from ..utils.k8s_utils import parse_group_version
from ..utils.unstructured import get_bool, get_slice, get_string

logger = logging.getLogger(__name__)

# A kind is only useful for migration if it can be read back and re-created.
REQUIRED_VERBS = ("list", "create", "get", "delete")


class DiscoveryHelper:
    """Caches the server's resource kinds until the next refresh."""

    def __init__(self, api_client: client.ApiClient):
        self._api_client = api_client
        self._resources: List[APIResourceGroup] = []

    def resources(self) -> Sequence[APIResourceGroup]:
        return list(self._resources)

    async def refresh(self) -> None:
        """Re-reads the groups and kinds served by the API server."""
        try:
            group_versions = await self._preferred_group_versions()
            resources = []
            for group_version in group_versions:
                resource_list = await self._get_resource_list(group_version)
                resources.append(self._to_resource_group(group_version, resource_list))
        except ApiException as e:
            raise DiscoveryError(f"Error refreshing API discovery: {e.status} {e.reason}") from e
        except CONNECTION_ERRORS as e:
            raise DiscoveryError(f"Error reaching the API server for discovery: {e!r}") from e
        except (KubeShiftError, ValueError, KeyError, TypeError) as e:
            raise DiscoveryError(f"Unexpected discovery response: {e}") from e

        self._resources = resources
        logger.debug(
            "Discovery refreshed: %d group versions, %d kinds.",
            len(resources),
            sum(len(group.resources) for group in resources),
        )

    async def _preferred_group_versions(self) -> List[str]:
        core_versions = await client.CoreApi(self._api_client).get_api_versions()
        group_versions = list(core_versions.versions or [])[:1]

        group_list = await client.ApisApi(self._api_client).get_api_versions()
        for group in group_list.groups or []:
            if group.preferred_version is not None:
                group_versions.append(group.preferred_version.group_version)
            elif group.versions:
                group_versions.append(group.versions[0].group_version)
        return group_versions

    async def _get_resource_list(self, group_version: str) -> Dict[str, Any]:
        group, _ = parse_group_version(group_version)
        path = f"/apis/{group_version}" if group else f"/api/{group_version}"
        return await self._api_client.call_api(
            path,
            "GET",
            header_params={"Accept": "application/json"},
            response_types_map={200: "object"},
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
        )

    @staticmethod
    def _to_resource_group(group_version: str, resource_list: Dict[str, Any]) -> APIResourceGroup:
        group, version = parse_group_version(group_version)
        descriptors = []
        for resource in get_slice(resource_list, "resources", []):
            name = get_string(resource, "name")
            # Subresources such as "pods/log" are not objects of their own
            if "/" in name:
                continue
            verbs = list(get_slice(resource, "verbs", []))
            if not all(verb in verbs for verb in REQUIRED_VERBS):
                continue
            descriptors.append(
                KindDescriptor(
                    group=group,
                    version=version,
                    kind=get_string(resource, "kind"),
                    name=name,
                    namespaced=get_bool(resource, "namespaced", False),
                    verbs=verbs,
                )
            )
        return APIResourceGroup(group_version=group_version, resources=descriptors)
