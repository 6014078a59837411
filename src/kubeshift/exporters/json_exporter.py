import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable

import aiofiles

from ..models.resource import UnstructuredResource
from .base_exporter import BaseExporter

logger = logging.getLogger(__name__)


class JSONExporter(BaseExporter):
    DEFAULT_FILENAME = "kubeshift-snapshot.json"

    async def export(self, resources: Iterable[UnstructuredResource | Dict[str, Any]], path: str | None = None) -> str:
        target = Path(path or self.DEFAULT_FILENAME)
        document = self.build_document(resources)
        target.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(target, "w", encoding="utf-8") as fh:
            await fh.write(json.dumps(document, ensure_ascii=False, indent=2))
        logger.info("Wrote %d object(s) to %s", len(document["items"]), target)
        return str(target)
