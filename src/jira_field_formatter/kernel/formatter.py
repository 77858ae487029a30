"""Value formatter: raw input -> JSON payload value for one field type.

Hard failures (illegal type pairing, malformed checklist JSON, structured
values in the wrong shape) raise. Soft failures (unparseable dates,
non-numeric numbers) return None so that one bad value never blocks the
other fields of the same request.
"""

import json
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional

from .dates import format_date_value, format_datetime_value
from .errors import ChecklistItemFormatError, InvalidFieldTypeError, StructuralConfigError, ValueFormatError
from .field_types import FieldType, KEY_FORMAT_TYPES, NAME_FORMAT_TYPES, coerce_field_type
from .time_tracking import parse_time_tracking
from .validation import (
    is_empty,
    parse_number,
    sanitize_string,
    validate_field_types,
    validate_value_for_field_type,
)


CASCADE_SEPARATOR = "->"


def split_comma_list(value: str) -> List[str]:
    """Split on commas, trim, and drop empty tokens (order preserved)."""
    return [token.strip() for token in value.split(",") if token.strip()]


def parse_cascading_option(value: str) -> Dict[str, Any]:
    """``"Parent -> Child"`` -> ``{"value": "Parent", "child": {"value": "Child"}}``.

    Segments past the second are ignored. An empty child segment is dropped.
    """
    parts = [part.strip() for part in value.strip().split(CASCADE_SEPARATOR)]
    if len(parts) > 1 and parts[1]:
        return {"value": parts[0], "child": {"value": parts[1]}}
    return {"value": parts[0]}


def parse_watchers(value: Any) -> Dict[str, List[Dict[str, str]]]:
    """Comma separated user names -> ``{"watchers": [{"name": ...}, ...]}``."""
    if is_empty(value):
        return {"watchers": []}
    return {"watchers": [{"name": name} for name in split_comma_list(str(value))]}


def _format_name(value: Any) -> Dict[str, str]:
    return {"name": sanitize_string(value)}


def _format_key(value: Any) -> Dict[str, str]:
    return {"key": sanitize_string(value)}


def _format_any(value: Any) -> str:
    """Trimmed text; list values are joined with commas, empty entries dropped."""
    if isinstance(value, (list, tuple)):
        return ",".join(sanitize_string(item) for item in value if not is_empty(item))
    return sanitize_string(value)


def _build_formatters() -> Dict[FieldType, Callable[[Any], Any]]:
    formatters: Dict[FieldType, Callable[[Any], Any]] = {}
    for field_type in NAME_FORMAT_TYPES:
        formatters[field_type] = _format_name
    for field_type in KEY_FORMAT_TYPES:
        formatters[field_type] = _format_key
    formatters.update({
        FieldType.OPTION_WITH_CHILD: lambda v: parse_cascading_option(sanitize_string(v)),
        FieldType.WATCHES: parse_watchers,
        FieldType.DATE: format_date_value,
        FieldType.DATETIME: format_datetime_value,
        FieldType.TIME_TRACKING: lambda v: parse_time_tracking(sanitize_string(v)),
        FieldType.NUMBER: parse_number,
        FieldType.STRING: sanitize_string,
        FieldType.ANY: _format_any,
    })
    return formatters


# Array is dispatched separately; every other member of FIELD_TYPES must have an entry
SCALAR_FORMATTERS = _build_formatters()


def format_value(value: Any, field_type: Any, array_item_type: Any = None) -> Any:
    """Format value for field_type (and array_item_type for arrays).

    Returns None for empty input, except watches which returns
    ``{"watchers": []}``.
    """
    check = validate_field_types(field_type, array_item_type)
    if not check.is_valid:
        raise InvalidFieldTypeError(check.error)
    field_type = coerce_field_type(field_type)

    if is_empty(value):
        if field_type is FieldType.WATCHES:
            return {"watchers": []}
        return None

    value_check = validate_value_for_field_type(value, field_type)
    if not value_check.is_valid:
        raise ValueFormatError(value_check.error)

    if field_type is FieldType.ARRAY:
        return format_array_value(value, coerce_field_type(array_item_type))

    if isinstance(value, Mapping):
        # Already in payload shape (checked above)
        return dict(value)

    formatter = SCALAR_FORMATTERS.get(field_type)
    if formatter is None:
        raise StructuralConfigError(f"No formatter registered for field type: {field_type.value}")
    return formatter(value)


def format_array_value(value: Any, array_item_type: Optional[FieldType]) -> List[Any]:
    """Format a comma list (or list) as an array of item-type payload values."""
    if array_item_type is None:
        raise InvalidFieldTypeError("Array field type is required for array fields")

    if array_item_type is FieldType.CHECKLIST_ITEM:
        return _parse_checklist_items(value)

    if isinstance(value, (list, tuple)):
        tokens = [token for token in value if not is_empty(token)]
    else:
        tokens = split_comma_list(sanitize_string(value))
    return [format_value(token, array_item_type) for token in tokens]


def _parse_checklist_items(value: Any) -> List[Any]:
    if isinstance(value, list):
        return list(value)
    try:
        parsed = json.loads(sanitize_string(value))
    except json.JSONDecodeError as e:
        raise ChecklistItemFormatError(f"Invalid JSON format for checklist-item: {e}") from e
    if not isinstance(parsed, list):
        raise ChecklistItemFormatError(
            f"Invalid JSON format for checklist-item: expected a JSON array, got {type(parsed).__name__}"
        )
    return parsed
