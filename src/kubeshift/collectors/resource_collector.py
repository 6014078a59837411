# src/kubeshift/collectors/resource_collector.py
"""
Collects the objects of a set of namespaces that should be carried over
when the namespaces are migrated, cloned or backed up.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from kubernetes_asyncio import client

from ..core.config import config
from ..core.exceptions import ConfigurationError, DiscoveryError, ObjectProcessingError
from ..core.inclusion import InclusionContext, should_collect
from ..core.k8s_client import get_api_client
from ..core.sanitizer import prepare_resources
from ..models.resource import CollectionRequest, KindDescriptor, UnstructuredResource
from ..utils.k8s_utils import parse_group_version
from .base_collector import BaseCollector
from .discovery import DiscoveryHelper
from .lister import DynamicLister
from .ownership import OwnershipOracle, ownership_from_config
from .typed_peek import TypedPeek

logger = logging.getLogger(__name__)

# Kinds that are portable and meaningful for migration
COLLECTED_KINDS = frozenset(
    (
        "PersistentVolumeClaim",
        "PersistentVolume",
        "Deployment",
        "StatefulSet",
        "DaemonSet",
        "ConfigMap",
        "Secret",
        "Service",
        "ServiceAccount",
        "ClusterRole",
        "ClusterRoleBinding",
    )
)

# Volumes don't carry their claim's labels; they are selected through the claim
UNSELECTED_KINDS = frozenset(("PersistentVolume",))


def resource_to_be_collected(descriptor: KindDescriptor) -> bool:
    return descriptor.kind in COLLECTED_KINDS


class ResourceCollector(BaseCollector):
    """
    Discovers, filters and deduplicates the objects of a set of namespaces.

    Collaborators can be injected; any that are missing are built on a shared
    ApiClient by ``init()``.
    """

    def __init__(
        self,
        ownership: Optional[OwnershipOracle] = None,
        discovery: Optional[DiscoveryHelper] = None,
        lister: Optional[DynamicLister] = None,
        peek: Optional[TypedPeek] = None,
        excluded_groups: Optional[Sequence[str]] = None,
    ):
        self.ownership = ownership
        self.discovery = discovery
        self.lister = lister
        self.peek = peek
        self.excluded_groups = frozenset(config.EXCLUDED_GROUPS if excluded_groups is None else excluded_groups)
        self._api_client: Optional[client.ApiClient] = None

    async def init(self) -> "ResourceCollector":
        """
        Binds the cluster collaborators and refreshes discovery once.

        Raises:
            ConfigurationError: No cluster configuration, or discovery unreachable.
        """
        if self.ownership is None:
            self.ownership = ownership_from_config(config.OWNED_PROVISIONERS)

        if self.discovery is None or self.lister is None or self.peek is None:
            self._api_client = await get_api_client()
            if self._api_client is None:
                raise ConfigurationError("Error getting cluster config: no in-cluster or kubeconfig configuration")
            self.discovery = self.discovery or DiscoveryHelper(self._api_client)
            self.lister = self.lister or DynamicLister(self._api_client)
            self.peek = self.peek or TypedPeek(self._api_client)

        try:
            await self.discovery.refresh()
        except DiscoveryError as e:
            await self.close()
            raise ConfigurationError(f"Error initializing API discovery: {e}") from e

        logger.debug("ResourceCollector initialized.")
        return self

    async def collect(self, namespaces: Sequence[str], label_selectors: Optional[Mapping[str, str]] = None):
        return await self.get_resources(namespaces, label_selectors)

    async def get_resources(
        self,
        namespaces: Sequence[str],
        label_selectors: Optional[Mapping[str, str]] = None,
        prepare: bool = True,
    ) -> List[UnstructuredResource]:
        """
        Gets all the resources in the given namespaces which match the label selectors.

        Args:
            namespaces: Namespaces to collect from, in order.
            label_selectors: Labels every collected object (or, for volumes,
                their claim) must carry. Empty collects everything.
            prepare: Sanitize the objects for re-creation before returning.

        Returns:
            The collected objects, unique by uid.

        Raises:
            DiscoveryError: Refreshing discovery failed.
            ListError: Listing a kind failed.
            ObjectProcessingError: Deciding whether an object is collected failed.
            SanitizationError: An object could not be prepared.
        """
        if self.discovery is None or self.lister is None or self.peek is None or self.ownership is None:
            raise ConfigurationError("ResourceCollector.init() must be called before collecting resources")

        request = CollectionRequest(namespaces=list(namespaces), label_selectors=dict(label_selectors or {}))
        await self.discovery.refresh()

        all_objects: List[UnstructuredResource] = []
        # Shared across groups so kinds served under several groups are only collected once
        seen: Set[str] = set()
        cache: Dict[str, object] = {}
        cluster_lists: Dict[Tuple[str, str], List[UnstructuredResource]] = {}

        for group in self.discovery.resources():
            group_name, _ = parse_group_version(group.group_version)
            if group_name in self.excluded_groups:
                logger.debug("Skipping excluded group version %s", group.group_version)
                continue

            for descriptor in group.resources:
                if not resource_to_be_collected(descriptor):
                    continue
                for ns in request.namespaces:
                    objects = await self._list(descriptor, ns, request.label_selectors, cluster_lists)
                    ctx = InclusionContext(
                        namespace=ns,
                        label_selectors=request.label_selectors,
                        peek=self.peek,
                        ownership=self.ownership,
                        cache=cache,
                    )
                    for obj in objects:
                        if obj.uid in seen:
                            continue
                        try:
                            collect = await should_collect(ctx, obj)
                        except Exception as e:
                            raise ObjectProcessingError(
                                f"Error processing object {descriptor.kind} {obj.describe()} "
                                f"for namespace {ns}: {e}"
                            ) from e
                        if not collect:
                            continue
                        all_objects.append(obj)
                        seen.add(obj.uid)

        logger.info(
            "Collected %d resource(s) from namespace(s) %s.",
            len(all_objects),
            ", ".join(request.namespaces),
        )
        if prepare:
            return self.prepare_resources(all_objects)
        return all_objects

    async def _list(
        self,
        descriptor: KindDescriptor,
        namespace: str,
        label_selectors: Mapping[str, str],
        cluster_lists: Dict[Tuple[str, str], List[UnstructuredResource]],
    ) -> List[UnstructuredResource]:
        selectors = {} if descriptor.kind in UNSELECTED_KINDS else label_selectors
        if descriptor.namespaced:
            return await self.lister.list(descriptor, namespace, selectors)

        # Cluster-scoped lists don't depend on the namespace; list them once per run
        key = (descriptor.group_version, descriptor.name)
        if key not in cluster_lists:
            cluster_lists[key] = await self.lister.list(descriptor, None, selectors)
        return cluster_lists[key]

    @staticmethod
    def prepare_resources(objects: Sequence[UnstructuredResource]) -> List[UnstructuredResource]:
        return prepare_resources(objects)

    async def close(self):
        """Close the Kubernetes API client if this collector created it."""
        if self._api_client:
            await self._api_client.close()
            logger.debug("ResourceCollector Kubernetes client closed.")
            self._api_client = None

    async def __aenter__(self) -> "ResourceCollector":
        return await self.init()

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

