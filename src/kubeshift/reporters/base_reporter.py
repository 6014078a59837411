# src/kubeshift/reporters/base_reporter.py
"""
Defines the abstract base class for all reporters.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models.resource import UnstructuredResource


class BaseReporter(ABC):
    """
    Abstract Base Class for all reporters.
    """

    @abstractmethod
    def report(self, data: List[UnstructuredResource]):
        """
        Takes the collected objects and presents them in a specific format.
        """
        pass
