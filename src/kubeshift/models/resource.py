# src/kubeshift/models/resource.py

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.exceptions import CastError
from ..utils.unstructured import get_map, get_string


class UnstructuredResource:
    """
    A Kubernetes object held as its raw, schema-less content.

    The wrapped dict is the object itself: sanitization mutates it in place.
    """

    __slots__ = ("content",)

    def __init__(self, content: Dict[str, Any]):
        if not isinstance(content, dict):
            raise CastError(f"Error casting object: {content!r}")
        self.content = content

    @property
    def kind(self) -> str:
        return get_string(self.content, "kind", "")

    @property
    def api_version(self) -> str:
        return get_string(self.content, "apiVersion", "")

    @property
    def metadata(self) -> Dict[str, Any]:
        return get_map(self.content, "metadata")

    @property
    def name(self) -> str:
        return get_string(self.content, "metadata.name", "")

    @property
    def namespace(self) -> str:
        return get_string(self.content, "metadata.namespace", "")

    @property
    def uid(self) -> str:
        return get_string(self.content, "metadata.uid", "")

    @property
    def labels(self) -> Dict[str, str]:
        return get_map(self.content, "metadata.labels", None) or {}

    @property
    def annotations(self) -> Dict[str, str]:
        return get_map(self.content, "metadata.annotations", None) or {}

    def to_dict(self) -> Dict[str, Any]:
        return self.content

    def describe(self) -> str:
        """Returns "namespace/name", or just the name for cluster-scoped objects."""
        metadata = self.content.get("metadata")
        if not isinstance(metadata, dict):
            return "<no metadata>"
        name = metadata.get("name", "")
        namespace = metadata.get("namespace")
        return f"{namespace}/{name}" if namespace else str(name)

    def __repr__(self) -> str:
        return f"<{self.content.get('kind', 'Unknown')} {self.describe()}>"


class KindDescriptor(BaseModel):
    """A listable resource kind as reported by API discovery."""

    model_config = ConfigDict(frozen=True)

    group: str = Field("", description="API group, empty for the core group")
    version: str = Field(..., description="API version")
    kind: str = Field(..., description="Kind name, e.g. 'PersistentVolume'")
    name: str = Field(..., description="Plural resource name, e.g. 'persistentvolumes'")
    namespaced: bool = Field(..., description="Whether objects of this kind live in a namespace")
    verbs: List[str] = Field(default_factory=list)

    @property
    def group_version(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


class APIResourceGroup(BaseModel):
    """The kinds served under one group/version."""

    model_config = ConfigDict(frozen=True)

    group_version: str
    resources: List[KindDescriptor] = Field(default_factory=list)


class CollectionRequest(BaseModel):
    """
    Input of one collection run.

    Attributes:
        namespaces: Ordered, distinct namespace names (at least one).
        label_selectors: Equality selector ANDed over all keys; empty matches all.
    """

    model_config = ConfigDict(frozen=True)

    namespaces: List[str]
    label_selectors: Dict[str, str] = Field(default_factory=dict)

    @field_validator("namespaces")
    @classmethod
    def _check_namespaces(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one namespace is required")
        if any(not ns for ns in value):
            raise ValueError("namespace names must not be empty")
        if len(set(value)) != len(value):
            raise ValueError("namespace names must be distinct")
        return value
