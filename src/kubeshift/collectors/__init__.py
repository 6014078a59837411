from .ownership import AllClaimsOwnership, OwnershipOracle, ProvisionerOwnership
from .resource_collector import COLLECTED_KINDS, ResourceCollector

__all__ = [
    "AllClaimsOwnership",
    "COLLECTED_KINDS",
    "OwnershipOracle",
    "ProvisionerOwnership",
    "ResourceCollector",
]
