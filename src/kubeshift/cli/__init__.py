"""
kubeshift CLI Package

This package exposes the top-level Typer `app` so tests and the console
entrypoint can import `kubeshift.cli.app`.
"""

import logging

from ..collectors.resource_collector import ResourceCollector
from ..reporters.console_reporter import ConsoleReporter
from .main import app

logger = logging.getLogger(__name__)

__all__ = ["app", "ConsoleReporter", "ResourceCollector"]
