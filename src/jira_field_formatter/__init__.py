"""jira_field_formatter: schema-driven formatting of Jira field values."""

import logging
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("jira-field-formatter")
except PackageNotFoundError:
    __version__ = "dev"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API exports
from jira_field_formatter.api import (
    build_field,
    build_fields,
    classify_schema,
    format_value,
    format_values,
    get_field_type_info,
    validate_values,
)
from jira_field_formatter.codes import ValidationCode
from jira_field_formatter.contracts import FieldIssue, FieldTypeInfo, FormatValuesResult, ValuesValidationReport
from jira_field_formatter.kernel.classifier import (
    ClassificationOutcome,
    ClassificationResult,
    ClassifierConfig,
    SchemaClassifier,
)
from jira_field_formatter.kernel.errors import (
    FieldFormatterError,
    SchemaClassificationError,
    StructuralConfigError,
    ValueFormatError,
)
from jira_field_formatter.kernel.field import Field
from jira_field_formatter.kernel.field_types import FieldFormat, FieldType
from jira_field_formatter.kernel.validation import ValidationResult

__all__ = [
    "__version__",
    "build_field",
    "build_fields",
    "classify_schema",
    "format_value",
    "format_values",
    "get_field_type_info",
    "validate_values",
    "ValidationCode",
    "FieldIssue",
    "FieldTypeInfo",
    "FormatValuesResult",
    "ValuesValidationReport",
    "ClassificationOutcome",
    "ClassificationResult",
    "ClassifierConfig",
    "SchemaClassifier",
    "FieldFormatterError",
    "SchemaClassificationError",
    "StructuralConfigError",
    "ValueFormatError",
    "Field",
    "FieldFormat",
    "FieldType",
    "ValidationResult",
]
