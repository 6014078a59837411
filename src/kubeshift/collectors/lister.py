# src/kubeshift/collectors/lister.py
"""
Generic object listing through the Kubernetes REST API.

Objects come back as plain dicts so that any kind, including ones this
package has no model for, can be collected.
"""

import logging
from typing import Any, List, Mapping, Optional

from kubernetes_asyncio import client
from kubernetes_asyncio.client.rest import ApiException

from ..core.config import config
from ..core.exceptions import CastError, ListError
from ..core.k8s_client import CONNECTION_ERRORS
from ..models.resource import KindDescriptor, UnstructuredResource
from ..utils.k8s_utils import format_label_selector

logger = logging.getLogger(__name__)


def _resource_path(descriptor: KindDescriptor, namespace: Optional[str]) -> str:
    if descriptor.group:
        base = f"/apis/{descriptor.group}/{descriptor.version}"
    else:
        base = f"/api/{descriptor.version}"
    if namespace:
        return f"{base}/namespaces/{namespace}/{descriptor.name}"
    return f"{base}/{descriptor.name}"


class DynamicLister:
    """Lists objects of any discovered kind, following pagination."""

    def __init__(self, api_client: client.ApiClient, page_size: Optional[int] = None):
        self._api_client = api_client
        self._page_size = page_size or config.LIST_PAGE_SIZE

    async def list(
        self,
        descriptor: KindDescriptor,
        namespace: Optional[str] = None,
        label_selectors: Optional[Mapping[str, str]] = None,
    ) -> List[UnstructuredResource]:
        """
        Lists every object of a kind.

        Args:
            descriptor: The kind to list.
            namespace: Namespace to list in; ignored for cluster-scoped kinds.
            label_selectors: Equality selector applied by the API server.

        Raises:
            ListError: The API server rejected the request or could not be reached.
            CastError: A returned item is not an object.
        """
        if not descriptor.namespaced:
            namespace = None
        path = _resource_path(descriptor, namespace)
        selector = format_label_selector(label_selectors)

        what = f"{descriptor.kind} ({descriptor.group_version})"
        if namespace:
            what += f" in namespace {namespace}"

        objects: List[UnstructuredResource] = []
        continue_token = None
        while True:
            query_params = [("limit", self._page_size)]
            if selector:
                query_params.append(("labelSelector", selector))
            if continue_token:
                query_params.append(("continue", continue_token))

            try:
                page = await self._api_client.call_api(
                    path,
                    "GET",
                    query_params=query_params,
                    header_params={"Accept": "application/json"},
                    response_types_map={200: "object"},
                    auth_settings=["BearerToken"],
                    _return_http_data_only=True,
                )
            except ApiException as e:
                raise ListError(f"Error listing {what}: {e.status} {e.reason}") from e
            except CONNECTION_ERRORS as e:
                raise ListError(f"Error listing {what}: {e!r}") from e

            objects.extend(self._extract_items(descriptor, page))
            continue_token = (page.get("metadata") or {}).get("continue")
            if not continue_token:
                break

        logger.debug("Listed %d %s object(s) at %s", len(objects), descriptor.kind, path)
        return objects

    @staticmethod
    def _extract_items(descriptor: KindDescriptor, page: Any) -> List[UnstructuredResource]:
        if not isinstance(page, dict):
            raise CastError(f"Error casting list response for {descriptor.kind}: {page!r}")
        items: List[UnstructuredResource] = []
        for item in page.get("items") or []:
            if not isinstance(item, dict):
                raise CastError(f"Error casting object: {item!r}")
            # List responses omit the type fields of their items
            item.setdefault("apiVersion", page.get("apiVersion") or descriptor.group_version)
            item.setdefault("kind", descriptor.kind)
            items.append(UnstructuredResource(item))
        return items
