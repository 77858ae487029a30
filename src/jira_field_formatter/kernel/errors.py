"""Exceptions raised by the kernel.

Soft value failures (unparseable dates, non-numeric numbers) are not
exceptions; the formatter returns None for them.
"""

from typing import Optional


class FieldFormatterError(Exception):
    """Base exception for all kernel errors."""
    pass


class StructuralConfigError(FieldFormatterError, ValueError):
    """Raised for caller configuration mistakes that retrying cannot fix."""
    pass


class InvalidFieldTypeError(StructuralConfigError):
    """Raised when a field type / array item type pairing is not legal."""
    pass


class ChecklistItemFormatError(StructuralConfigError):
    """Raised when a checklist-item array value is not a JSON array literal."""
    pass


class ValueFormatError(FieldFormatterError, ValueError):
    """Raised when a structured value does not have the shape its field type needs."""
    pass


class SchemaClassificationError(FieldFormatterError):
    """Base exception for schema descriptors that cannot be classified."""
    pass


class InvalidSchemaError(SchemaClassificationError):
    """Raised when the schema descriptor is not a mapping."""
    pass


class UnrecognizedSchemaError(SchemaClassificationError):
    """Raised when no classification rule matches a schema descriptor."""

    def __init__(self, schema_type: Optional[str], custom: Optional[str]):
        self.schema_type = schema_type
        self.custom = custom
        super().__init__(
            f"Unsupported schema mapping (type={schema_type}, custom={custom or 'n/a'})"
        )


class MissingArrayItemsError(SchemaClassificationError, StructuralConfigError):
    """Raised when an array schema has no items descriptor."""

    def __init__(self):
        super().__init__("Array schema missing items definition")


class ArrayItemSchemaError(SchemaClassificationError):
    """Raised when the item descriptor of an array schema cannot be classified."""

    def __init__(self, inner_message: str):
        self.inner_message = inner_message
        super().__init__(f"Failed to map array item schema: {inner_message}")
