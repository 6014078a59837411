# src/kubeshift/collectors/typed_peek.py
"""
Typed lookups for the few fields the collector reads through the typed API:
claim phase and labels, and ClusterRoleBinding subjects and role references.
"""

import logging
from typing import List

from kubernetes_asyncio import client
from kubernetes_asyncio.client.rest import ApiException

from ..core.exceptions import NotFoundError, ResourceLookupError
from ..core.k8s_client import CONNECTION_ERRORS

logger = logging.getLogger(__name__)

def _lookup_error(what: str, e: Exception) -> ResourceLookupError:
    if not isinstance(e, ApiException):
        return ResourceLookupError(f"Error getting {what}: {e!r}")
    if e.status == 404:
        return NotFoundError(f"{what} not found")
    return ResourceLookupError(f"Error getting {what}: {e.status} {e.reason}")


class TypedPeek:
    def __init__(self, api_client: client.ApiClient):
        self._core_api = client.CoreV1Api(api_client)
        self._rbac_api = client.RbacAuthorizationV1Api(api_client)

    async def get_claim(self, name: str, namespace: str) -> client.V1PersistentVolumeClaim:
        try:
            return await self._core_api.read_namespaced_persistent_volume_claim(name, namespace)
        except (ApiException, *CONNECTION_ERRORS) as e:
            raise _lookup_error(f"PersistentVolumeClaim {namespace}/{name}", e) from e

    async def get_cluster_role_binding(self, name: str) -> client.V1ClusterRoleBinding:
        try:
            return await self._rbac_api.read_cluster_role_binding(name)
        except (ApiException, *CONNECTION_ERRORS) as e:
            raise _lookup_error(f"ClusterRoleBinding {name}", e) from e

    async def list_cluster_role_bindings(self) -> List[client.V1ClusterRoleBinding]:
        try:
            bindings = await self._rbac_api.list_cluster_role_binding()
        except (ApiException, *CONNECTION_ERRORS) as e:
            raise _lookup_error("ClusterRoleBinding list", e) from e
        return list(bindings.items or [])
