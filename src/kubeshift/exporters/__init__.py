"""Exporters package for file-based snapshot outputs."""

from .base_exporter import BaseExporter
from .json_exporter import JSONExporter

__all__ = ["BaseExporter", "JSONExporter"]
