"""Issue code constants for jira_field_formatter.api batch results.

These constants prevent stringly-typed issue codes and ensure
client code uses the correct codes.
"""

from enum import Enum


class ValidationCode(str, Enum):
    """Batch formatting/validation issue codes."""

    # Errors (field left out of the payload)
    REQUIRED = "REQUIRED"
    INVALID_VALUE = "INVALID_VALUE"
    FORMAT_ERROR = "FORMAT_ERROR"

    # Warnings (non-blocking)
    UNCONVERTIBLE_VALUE = "UNCONVERTIBLE_VALUE"
    UNKNOWN_FIELD = "UNKNOWN_FIELD"
    SCHEMA_FALLBACK = "SCHEMA_FALLBACK"
