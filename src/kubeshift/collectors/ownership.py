# src/kubeshift/collectors/ownership.py
"""
Ownership oracles decide whether a storage backend manages a claim, and so
whether the claim (and the volume bound to it) belongs in a migration.
"""

import logging
from typing import Iterable, Optional, Protocol

from kubernetes_asyncio import client

logger = logging.getLogger(__name__)

PROVISIONER_ANNOTATIONS = (
    "volume.kubernetes.io/storage-provisioner",
    "volume.beta.kubernetes.io/storage-provisioner",
)


class OwnershipOracle(Protocol):
    async def owns(self, claim: client.V1PersistentVolumeClaim) -> bool:
        """Returns True if the backend manages the claim's volume."""
        ...


class AllClaimsOwnership:
    """Treats every claim as owned."""

    async def owns(self, claim: client.V1PersistentVolumeClaim) -> bool:
        return True


class ProvisionerOwnership:
    """
    Owns the claims provisioned by one of the given provisioners.

    The provisioner is read from the claim's provisioner annotations. Claims
    without one (statically bound) are matched on their storage class name
    instead, when storage classes are given.
    """

    def __init__(self, provisioners: Iterable[str], storage_classes: Optional[Iterable[str]] = None):
        self.provisioners = frozenset(provisioners)
        self.storage_classes = frozenset(storage_classes or ())

    async def owns(self, claim: client.V1PersistentVolumeClaim) -> bool:
        annotations = (claim.metadata.annotations if claim.metadata else None) or {}
        for key in PROVISIONER_ANNOTATIONS:
            provisioner = annotations.get(key)
            if provisioner:
                return provisioner in self.provisioners

        storage_class = claim.spec.storage_class_name if claim.spec else None
        if storage_class and storage_class in self.storage_classes:
            return True

        logger.debug(
            "Claim %s/%s has no provisioner owned by this backend.",
            claim.metadata.namespace if claim.metadata else "",
            claim.metadata.name if claim.metadata else "",
        )
        return False


def ownership_from_config(provisioners: Iterable[str]) -> OwnershipOracle:
    """Builds the oracle described by KUBESHIFT_OWNED_PROVISIONERS."""
    provisioners = list(provisioners)
    if not provisioners:
        return AllClaimsOwnership()
    logger.info("Collecting claims provisioned by: %s", ", ".join(provisioners))
    return ProvisionerOwnership(provisioners)
