# =============================================================================
# Path Extractor - Dot/Bracket Traversal
# =============================================================================
# Resolves paths like "Records[0].s3.bucket.name" against nested dict/list
# data. Every failure collapses to NOT_FOUND; nothing here raises.
# =============================================================================

import re
from typing import Any, List, Mapping, Sequence

_INDEX_RE = re.compile(r"\[([0-9]+)\]")


class _NotFound:
    """Sentinel for a path that does not resolve (distinct from a stored None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


def split_path(path: str) -> List[str]:
    """
    Split a path expression into segments.

    "Records[0].s3.bucket" -> ["Records", "0", "s3", "bucket"]
    """
    if not isinstance(path, str):
        return []
    return [p for p in _INDEX_RE.sub(r".\1", path).split(".") if p != ""]


def extract_value(obj: Any, path: str) -> Any:
    """
    Extract a value from nested data using dot notation.

    Args:
        obj: Root value (dicts, lists, tuples in any mixture)
        path: Path expression, e.g. "user.name" or "Records[0].eventSource"

    Returns:
        The value at the path, or NOT_FOUND
    """
    if obj is None or not path or not isinstance(path, str):
        return NOT_FOUND

    current = obj
    for part in split_path(path):
        if current is None:
            return NOT_FOUND

        if part.isascii() and part.isdigit() and _is_sequence(current):
            index = int(part)
            if index < len(current):
                current = current[index]
                continue
            return NOT_FOUND

        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return NOT_FOUND

    return current


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))
