# src/kubeshift/reporters/console_reporter.py
"""
A reporter that displays the collected objects in a formatted table in the console.
"""

import logging
from collections import Counter
from typing import List

from rich.console import Console
from rich.table import Table

from ..models.resource import UnstructuredResource
from .base_reporter import BaseReporter

logger = logging.getLogger(__name__)


class ConsoleReporter(BaseReporter):
    """
    Renders a collection snapshot to the console using the 'rich' library.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def report(self, data: List[UnstructuredResource]):
        """
        Displays one row per collected object, then a count per kind.
        """
        if not data:
            self.console.print("No resources collected.", style="yellow")
            return

        table = Table(
            title="kubeshift Collected Resources",
            header_style="bold magenta",
        )
        table.add_column("Kind", style="cyan")
        table.add_column("Namespace", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Labels", style="dim")

        for obj in sorted(data, key=lambda item: (item.kind, item.namespace, item.name)):
            labels = ", ".join(f"{key}={value}" for key, value in sorted(obj.labels.items()))
            table.add_row(obj.kind, obj.namespace or "-", obj.name, labels)

        self.console.print(table)

        counts = Counter(obj.kind for obj in data)
        summary = Table(title="Summary", header_style="bold magenta")
        summary.add_column("Kind", style="cyan")
        summary.add_column("Count", style="green", justify="right")
        for kind, count in sorted(counts.items()):
            summary.add_row(kind, str(count))
        summary.add_row("Total", str(len(data)), style="bold")
        self.console.print(summary)
        logger.debug("Reported %d resource(s) to the console.", len(data))
