"""Time tracking values ("2w 3d 4h 30m")."""

import re
from typing import Any, Dict


_TIME_TRACKING_PATTERN = re.compile(r"^(\d+[wdhm]\s*)+$")

_COMPONENT_PATTERNS = {
    "weeks": re.compile(r"(\d+)w"),
    "days": re.compile(r"(\d+)d"),
    "hours": re.compile(r"(\d+)h"),
    "minutes": re.compile(r"(\d+)m"),
}


def parse_time_tracking(value: Any) -> Dict[str, str]:
    """Wrap a duration as ``{"originalEstimate": ...}``.

    The tracker accepts many duration syntaxes itself, so the string is passed
    through verbatim (trimmed). Blank or non-string input yields an empty dict.
    """
    if not isinstance(value, str) or not value.strip():
        return {}
    return {"originalEstimate": value.strip()}


def is_valid_time_tracking_format(value: Any) -> bool:
    """True for strings made only of ``<n>w``, ``<n>d``, ``<n>h`` and ``<n>m`` parts."""
    if not isinstance(value, str) or not value:
        return False
    return _TIME_TRACKING_PATTERN.match(value.strip()) is not None


def parse_time_components(value: Any) -> Dict[str, int]:
    """Decompose a duration into weeks/days/hours/minutes for display.

    Not used on the formatting path. Units that are absent are omitted.
    """
    if not isinstance(value, str) or not value:
        return {}
    components: Dict[str, int] = {}
    for unit, pattern in _COMPONENT_PATTERNS.items():
        match = pattern.search(value)
        if match:
            components[unit] = int(match.group(1))
    return components
