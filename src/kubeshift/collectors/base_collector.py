# src/kubeshift/collectors/base_collector.py
"""
This module defines the abstract base class for collectors of cluster
objects, so the CLI and callers can drive and release them uniformly.
"""

from abc import ABC, abstractmethod
from typing import Any, List


class BaseCollector(ABC):
    """
    Abstract Base Class for cluster collectors.
    """

    @abstractmethod
    async def collect(self, *args, **kwargs) -> List[Any]:
        """
        The main method for a collector. It should fetch objects from the
        cluster and return the ones that were selected.
        """
        pass

    async def close(self):
        """
        Clean up resources (e.g., close API clients).
        """
        pass
