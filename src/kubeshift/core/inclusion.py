# src/kubeshift/core/inclusion.py
"""
Per-kind rules deciding whether a listed object belongs in a collection.

Rules are registered by kind with ``@inclusion_rule``. Kinds without a rule
are always collected. Each rule receives the InclusionContext of the
namespace being collected and the candidate object.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Mapping, Optional

from kubernetes_asyncio import client

from ..models.resource import UnstructuredResource
from ..utils.k8s_utils import labels_match
from ..utils.unstructured import get_map, get_string

if TYPE_CHECKING:
    from ..collectors.ownership import OwnershipOracle
    from ..collectors.typed_peek import TypedPeek

logger = logging.getLogger(__name__)

CLAIM_BOUND = "Bound"
DEFAULT_SERVICE_NAME = "kubernetes"
DEFAULT_SERVICE_ACCOUNT_NAME = "default"


@dataclass
class InclusionContext:
    """
    State shared by the rules during one collection run.

    ``cache`` lives for the whole run (across namespaces) and memoizes
    lookups whose answer does not depend on the namespace.
    """

    namespace: str
    label_selectors: Mapping[str, str]
    peek: "TypedPeek"
    ownership: "OwnershipOracle"
    cache: Dict[str, Any] = field(default_factory=dict)

    async def cluster_role_bindings(self) -> List[client.V1ClusterRoleBinding]:
        if "cluster_role_bindings" not in self.cache:
            self.cache["cluster_role_bindings"] = await self.peek.list_cluster_role_bindings()
        return self.cache["cluster_role_bindings"]


InclusionRule = Callable[[InclusionContext, UnstructuredResource], Awaitable[bool]]

INCLUSION_RULES: Dict[str, InclusionRule] = {}


def inclusion_rule(kind: str) -> Callable[[InclusionRule], InclusionRule]:
    def register(func: InclusionRule) -> InclusionRule:
        INCLUSION_RULES[kind] = func
        return func

    return register


def get_inclusion_rule(kind: str) -> Optional[InclusionRule]:
    return INCLUSION_RULES.get(kind)


async def should_collect(ctx: InclusionContext, obj: UnstructuredResource) -> bool:
    rule = get_inclusion_rule(obj.kind)
    if rule is None:
        return True
    collect = await rule(ctx, obj)
    if not collect:
        logger.debug("Skipping %r for namespace %s", obj, ctx.namespace)
    return collect


def _has_subject_in(binding: client.V1ClusterRoleBinding, namespace: str) -> bool:
    return any(subject.namespace == namespace for subject in binding.subjects or [])


@inclusion_rule("Service")
async def _service(ctx: InclusionContext, obj: UnstructuredResource) -> bool:
    return obj.name != DEFAULT_SERVICE_NAME


@inclusion_rule("ServiceAccount")
async def _service_account(ctx: InclusionContext, obj: UnstructuredResource) -> bool:
    return obj.name != DEFAULT_SERVICE_ACCOUNT_NAME


@inclusion_rule("PersistentVolumeClaim")
async def _claim(ctx: InclusionContext, obj: UnstructuredResource) -> bool:
    claim = await ctx.peek.get_claim(obj.name, ctx.namespace)
    phase = claim.status.phase if claim.status else None
    if phase != CLAIM_BOUND:
        return False
    return await ctx.ownership.owns(claim)


@inclusion_rule("PersistentVolume")
async def _volume(ctx: InclusionContext, obj: UnstructuredResource) -> bool:
    content = obj.content
    if get_string(content, "status.phase", "") != CLAIM_BOUND:
        return False

    # Only volumes bound to a claim in the requested namespace
    claim_ref = get_map(content, "spec.claimRef", None)
    if not claim_ref:
        return False
    claim_name = get_string(claim_ref, "name", "")
    if not claim_name:
        return False
    claim_namespace = get_string(claim_ref, "namespace", "")
    if claim_namespace != ctx.namespace:
        return False

    claim = await ctx.peek.get_claim(claim_name, claim_namespace)
    if not await ctx.ownership.owns(claim):
        return False

    # Volumes don't inherit labels from their claims, so select on the claim's
    claim_labels = (claim.metadata.labels if claim.metadata else None) or {}
    if ctx.label_selectors and not claim_labels:
        return False
    return labels_match(ctx.label_selectors, claim_labels)


@inclusion_rule("ClusterRoleBinding")
async def _cluster_role_binding(ctx: InclusionContext, obj: UnstructuredResource) -> bool:
    binding = await ctx.peek.get_cluster_role_binding(obj.name)
    return _has_subject_in(binding, ctx.namespace)


@inclusion_rule("ClusterRole")
async def _cluster_role(ctx: InclusionContext, obj: UnstructuredResource) -> bool:
    for binding in await ctx.cluster_role_bindings():
        if binding.role_ref is None or binding.role_ref.name != obj.name:
            continue
        if _has_subject_in(binding, ctx.namespace):
            return True
    return False
