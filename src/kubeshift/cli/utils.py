import logging
from typing import Dict, List, Optional

import typer

logger = logging.getLogger(__name__)


def parse_label_selectors(selectors: Optional[List[str]]) -> Dict[str, str]:
    """Parses repeated 'key=value' options into a selector mapping."""
    parsed: Dict[str, str] = {}
    for selector in selectors or []:
        for item in selector.split(","):
            item = item.strip()
            if not item:
                continue
            key, sep, value = item.partition("=")
            if not sep or not key.strip():
                raise typer.BadParameter(f"Invalid label selector '{item}'. Use the form 'key=value'.")
            parsed[key.strip()] = value.strip()
    return parsed
