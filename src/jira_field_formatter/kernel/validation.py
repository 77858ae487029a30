"""Validation helpers that gate formatting.

Two levels of checks:

- ``validate_field_types``: is the (field type, array item type) pair legal?
  Runs before any value is looked at, so a bad type configuration is
  reported independently of bad value content.
- ``validate_value_for_field_type``: light-touch acceptance of a value.
  Most types accept any non-empty value; dates and numbers are checked by the
  formatter, which returns None instead of raising.
"""

import math
import re
from collections.abc import Mapping
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

from .field_types import (
    FieldType,
    KEY_FORMAT_TYPES,
    NAME_FORMAT_TYPES,
    coerce_field_type,
    is_valid_array_field_type,
    is_valid_field_type,
)


_JIRA_KEY = re.compile(r"^[A-Z]+-\d+$")
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ISO_DATETIME_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")


class FieldTypeCheck(BaseModel):
    """Outcome of a type-level check; never raised, so callers can batch them."""
    is_valid: bool
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class ValidationResult(BaseModel):
    """Outcome of validating a value for one field."""
    valid: bool
    errors: List[str] = []

    model_config = ConfigDict(frozen=True)


def is_empty(value: Any) -> bool:
    """None, or a string that is empty after trimming."""
    return value is None or (isinstance(value, str) and value.strip() == "")


def sanitize_string(value: Any) -> str:
    return str(value).strip()


def parse_number(value: Any) -> Optional[float]:
    """Parse the leading number of value; None if there is none.

    ``"12.5kg"`` parses to 12.5. NaN and infinities are rejected since they
    are not representable in JSON.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value).strip())
        if not match:
            return None
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def is_jira_key(value: Any) -> bool:
    """True for issue keys such as ``PROJ-123``."""
    return isinstance(value, str) and _JIRA_KEY.match(value) is not None


def is_already_formatted(value: Any, field_type: Any) -> bool:
    """True if value already has the payload shape field_type expects.

    Lets callers hand in pre-built payload fragments (``{"name": "Bug"}``,
    ``{"key": "PROJ"}``) and have them pass through untouched.
    """
    if is_empty(value):
        return False
    field_type = coerce_field_type(field_type)
    is_mapping = isinstance(value, Mapping)

    if field_type is FieldType.OPTION_WITH_CHILD:
        return is_mapping and ("value" in value or "id" in value)
    if field_type in NAME_FORMAT_TYPES:
        return is_mapping and ("name" in value or "id" in value)
    if field_type in KEY_FORMAT_TYPES:
        return is_mapping and ("key" in value or "id" in value)
    if field_type is FieldType.ARRAY:
        return isinstance(value, list)
    if field_type is FieldType.DATE:
        return isinstance(value, str) and _ISO_DATE.match(value) is not None
    if field_type is FieldType.DATETIME:
        return isinstance(value, str) and _ISO_DATETIME_PREFIX.match(value) is not None
    if field_type is FieldType.TIME_TRACKING:
        return is_mapping and ("originalEstimate" in value or "remainingEstimate" in value)
    if field_type is FieldType.WATCHES:
        return is_mapping and "watchers" in value
    if field_type is FieldType.STRING:
        return isinstance(value, str)
    if field_type is FieldType.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return True


def validate_field_types(field_type: Any, array_item_type: Any = None) -> FieldTypeCheck:
    """Check that field_type is known and the array item pairing is legal."""
    if not is_valid_field_type(field_type):
        return FieldTypeCheck(is_valid=False, error=f"Invalid field type: {_label(field_type)}")

    if coerce_field_type(field_type) is FieldType.ARRAY:
        if array_item_type is None or array_item_type == "":
            return FieldTypeCheck(
                is_valid=False,
                error='Array field type is required when fieldType is "array"',
            )
        if not is_valid_array_field_type(array_item_type):
            return FieldTypeCheck(
                is_valid=False,
                error=f"Invalid array field type: {_label(array_item_type)}",
            )
    elif array_item_type is not None:
        return FieldTypeCheck(
            is_valid=False,
            error=(
                f'Array field type {_label(array_item_type)} is only allowed when fieldType is "array" '
                f"(got {_label(field_type)})"
            ),
        )

    return FieldTypeCheck(is_valid=True)


def validate_value_for_field_type(value: Any, field_type: Any) -> FieldTypeCheck:
    """Light-touch acceptance of value for field_type.

    Empty values are acceptable (they format to None). Structured values must
    already be in the payload shape of the field type; lists are only
    accepted for array fields.
    """
    if is_empty(value):
        return FieldTypeCheck(is_valid=True)

    field_type = coerce_field_type(field_type)
    if field_type is FieldType.ANY:
        return FieldTypeCheck(is_valid=True)

    if isinstance(value, Mapping):
        if is_already_formatted(value, field_type):
            return FieldTypeCheck(is_valid=True)
        return FieldTypeCheck(
            is_valid=False,
            error=f"Structured value is not in the expected shape for field type {_label(field_type)}",
        )

    if isinstance(value, (list, tuple)) and field_type is not FieldType.ARRAY:
        return FieldTypeCheck(
            is_valid=False,
            error=f"List values are only accepted for array fields (got {_label(field_type)})",
        )

    return FieldTypeCheck(is_valid=True)


def _label(tag: Any) -> str:
    return tag.value if isinstance(tag, FieldType) else str(tag)
