# =============================================================================
# Pattern Matching - Structural Event Filters
# =============================================================================
# Pattern forms:
#   "exact"          exact match against the string form of the value
#   "prefix:*"       wildcard suffix (prefix match)
#   "*"              existence (any non-null value)
#   ["a", "b:*"]     OR over alternative patterns, evaluated in order
#
# A match config maps path expressions to patterns; every entry must match.
# =============================================================================

import json
import logging
from typing import Any, Dict, List, Mapping, Union

from src.runtime.paths import NOT_FOUND, extract_value

logger = logging.getLogger(__name__)

Pattern = Union[str, List[str]]
MatchConfig = Dict[str, Pattern]


def to_match_string(value: Any) -> str:
    """
    Coerce a value to the text used for pattern comparison.

    Booleans render as "true"/"false", integral floats drop the fraction
    (1.0 -> "1"), containers render as compact JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def match_pattern(value: Any, pattern: Any) -> bool:
    """
    Check whether a single value matches a pattern.

    None and NOT_FOUND never match, not even "*".
    """
    if value is None or value is NOT_FOUND:
        return False

    if isinstance(pattern, (list, tuple)):
        return any(match_pattern(value, p) for p in pattern)

    if not isinstance(pattern, str):
        return False

    if pattern == "*":
        return True

    text = to_match_string(value)

    if pattern.endswith("*"):
        return text.startswith(pattern[:-1])

    return text == pattern


def matches_patterns(event: Any, match: Any) -> bool:
    """
    Evaluate a match config against an event with AND semantics.

    Accepts either the bare path->pattern mapping or a listener config of
    the form {"match": {...}}. A missing, non-mapping or empty config never
    matches.
    """
    if (
        isinstance(match, Mapping)
        and set(match.keys()) == {"match"}
        and isinstance(match["match"], Mapping)
    ):
        match = match["match"]

    if not isinstance(match, Mapping) or not match:
        return False

    for path, pattern in match.items():
        value = extract_value(event, path)
        if not match_pattern(value, pattern):
            logger.debug(f"Pattern miss at {path!r}: {pattern!r}")
            return False

    return True
