from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable

from ..models.resource import UnstructuredResource


class BaseExporter(ABC):
    """Base class for snapshot writers.

    A snapshot is a Kubernetes ``v1/List`` holding the collected objects, so it
    can be fed back to ``kubectl apply -f``. Subclasses pick the encoding.
    """

    DEFAULT_FILENAME: str = "kubeshift-snapshot"

    @staticmethod
    def build_document(resources: Iterable[UnstructuredResource | Dict[str, Any]]) -> Dict[str, Any]:
        items = [obj.to_dict() if isinstance(obj, UnstructuredResource) else obj for obj in resources or []]
        return {"apiVersion": "v1", "kind": "List", "items": items}

    @abstractmethod
    async def export(self, resources: Iterable[UnstructuredResource | Dict[str, Any]], path: str | None = None) -> str:
        """Write the snapshot and return the path written."""
        raise NotImplementedError()
