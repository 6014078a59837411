from typing import Mapping, Optional, Tuple


def parse_group_version(group_version: str) -> Tuple[str, str]:
    """
    Splits a group/version string into its parts.

    The legacy core group has no prefix, so "v1" parses to ("", "v1").
    """
    if not group_version:
        raise ValueError("group version must not be empty")
    parts = group_version.split("/")
    if len(parts) == 1:
        return "", parts[0]
    if len(parts) == 2 and parts[0] and parts[1]:
        return parts[0], parts[1]
    raise ValueError(f"unexpected group version string: {group_version!r}")


def format_label_selector(labels: Optional[Mapping[str, str]]) -> str:
    """Renders a label mapping as an equality-based selector string."""
    if not labels:
        return ""
    return ",".join(f"{key}={labels[key]}" for key in sorted(labels))


def labels_match(selector: Optional[Mapping[str, str]], labels: Optional[Mapping[str, str]]) -> bool:
    """
    True when every key/value of the selector appears in the labels.

    An empty selector matches everything.
    """
    if not selector:
        return True
    labels = labels or {}
    return all(key in labels and labels[key] == value for key, value in selector.items())
