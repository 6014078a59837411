# src/kubeshift/core/sanitizer.py
"""
Prepares collected objects for re-creation in another namespace or cluster.

Status and cluster-assigned metadata are dropped from every object, and
kinds registered with ``@prepare_rule`` get their own rewrites on top.
Objects are modified in place.
"""

import logging
from typing import Callable, Dict, Iterable, List

from .exceptions import FieldNotFoundError, KubeShiftError, SanitizationError
from ..models.resource import UnstructuredResource
from ..utils.unstructured import get_map, get_string

logger = logging.getLogger(__name__)

HEADLESS_CLUSTER_IP = "None"
KEPT_METADATA_FIELDS = frozenset(("name", "namespace", "labels", "annotations"))

PrepareRule = Callable[[UnstructuredResource], None]

PREPARE_RULES: Dict[str, PrepareRule] = {}


def prepare_rule(kind: str) -> Callable[[PrepareRule], PrepareRule]:
    def register(func: PrepareRule) -> PrepareRule:
        PREPARE_RULES[kind] = func
        return func

    return register


@prepare_rule("PersistentVolume")
def _prepare_volume(obj: UnstructuredResource) -> None:
    spec = get_map(obj.content, "spec")
    # Let the volume rebind to any matching claim at the destination
    spec.pop("claimRef", None)
    # The storage class may not exist at the destination
    spec.pop("storageClassName", None)


@prepare_rule("Service")
def _prepare_service(obj: UnstructuredResource) -> None:
    spec = get_map(obj.content, "spec")
    try:
        cluster_ip = get_string(spec, "clusterIP")
    except FieldNotFoundError:
        return
    # Headless services keep their "None" cluster IP
    if cluster_ip != HEADLESS_CLUSTER_IP:
        spec.pop("clusterIP", None)
        spec.pop("clusterIPs", None)


def prepare_resource(obj: UnstructuredResource) -> UnstructuredResource:
    content = obj.content
    content.pop("status", None)

    rule = PREPARE_RULES.get(obj.kind)
    if rule is not None:
        try:
            rule(obj)
        except KubeShiftError as e:
            raise SanitizationError(f"Error preparing {obj.kind} resource {obj.describe()}: {e}") from e

    try:
        metadata = get_map(content, "metadata")
    except KubeShiftError as e:
        raise SanitizationError(f"Error getting metadata for resource {obj.describe()}: {e}") from e
    for key in list(metadata):
        if key not in KEPT_METADATA_FIELDS:
            del metadata[key]
    return obj


def prepare_resources(objects: Iterable[UnstructuredResource]) -> List[UnstructuredResource]:
    """
    Sanitizes every object of a collection in place.

    Raises:
        SanitizationError: An object is missing a field its kind requires.
    """
    prepared = [prepare_resource(obj) for obj in objects]
    logger.debug("Prepared %d resource(s) for re-creation.", len(prepared))
    return prepared

