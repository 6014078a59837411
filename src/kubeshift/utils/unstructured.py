"""
Strict accessors for nested fields of unstructured Kubernetes objects.

Paths are dotted (``"spec.claimRef.name"``). A missing path raises
FieldNotFoundError unless a default is supplied; a value of the wrong type
always raises CastError.
"""

from typing import Any, Dict, List, Mapping

from ..core.exceptions import CastError, FieldNotFoundError

_MISSING = object()


def get_value(content: Mapping[str, Any], path: str, default: Any = _MISSING) -> Any:
    current: Any = content
    walked = []
    for key in path.split("."):
        if not isinstance(current, Mapping):
            raise CastError(f"value at '{'.'.join(walked)}' is not a map (got {type(current).__name__})")
        if key not in current:
            if default is not _MISSING:
                return default
            raise FieldNotFoundError(f"key '{path}' not found")
        current = current[key]
        walked.append(key)
    return current


def _typed(content: Mapping[str, Any], path: str, expected: type, default: Any) -> Any:
    value = get_value(content, path, default)
    if default is not _MISSING and value is default:
        return value
    if not isinstance(value, expected):
        raise CastError(f"value at '{path}' is not a {expected.__name__} (got {type(value).__name__})")
    return value


def get_string(content: Mapping[str, Any], path: str, default: Any = _MISSING) -> str:
    return _typed(content, path, str, default)


def get_map(content: Mapping[str, Any], path: str, default: Any = _MISSING) -> Dict[str, Any]:
    return _typed(content, path, dict, default)


def get_bool(content: Mapping[str, Any], path: str, default: Any = _MISSING) -> bool:
    return _typed(content, path, bool, default)


def get_slice(content: Mapping[str, Any], path: str, default: Any = _MISSING) -> List[Any]:
    return _typed(content, path, list, default)
