"""Public API for jira_field_formatter.

High-level functions that return complete, structured results. Callers
should use these instead of importing from _internal.

Nothing here talks to the tracker: metadata entries and raw values are
handed in by the caller, payload values are handed back.
"""

import difflib
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from jira_field_formatter._internal.fallback import FallbackReporter, default_reporter
from jira_field_formatter.codes import ValidationCode
from jira_field_formatter.contracts import (
    FieldIssue,
    FieldSuggestion,
    FieldTypeInfo,
    FormatValuesResult,
    ValuesValidationReport,
)
from jira_field_formatter.kernel.classifier import ClassificationResult, SchemaClassifier, default_classifier
from jira_field_formatter.kernel.errors import FieldFormatterError, InvalidFieldTypeError
from jira_field_formatter.kernel.field import Field
from jira_field_formatter.kernel.field_types import (
    FIELD_TYPE_DESCRIPTIONS,
    FieldType,
    coerce_field_type,
    get_field_format,
    is_valid_field_type,
)
from jira_field_formatter.kernel.formatter import format_value


logger = logging.getLogger(__name__)

SUGGESTION_LIMIT = 3

__all__ = [
    "classify_schema",
    "format_value",
    "build_field",
    "build_fields",
    "format_values",
    "validate_values",
    "get_field_type_info",
    "Field",
    "ClassificationResult",
    "FormatValuesResult",
    "ValuesValidationReport",
    "FieldTypeInfo",
]


def classify_schema(schema: Any, classifier: Optional[SchemaClassifier] = None) -> ClassificationResult:
    """Classify a schema descriptor; raises SchemaClassificationError if no rule matches."""
    return (classifier or default_classifier).classify(schema)


def build_field(
    entry: Mapping,
    classifier: Optional[SchemaClassifier] = None,
    reporter: Optional[FallbackReporter] = None,
) -> Field:
    """Build a Field from a metadata entry ``{id|key, name, required, schema}``.

    A schema the classifier does not recognize yields an ANY field; the
    reporter (process-wide by default) logs the first such fallback.
    """
    key = entry.get("key") or entry.get("id") or entry.get("fieldId")
    if not key:
        raise ValueError(f"Field entry has no id or key: {sorted(entry.keys())}")
    field = Field.from_schema(
        key=key,
        schema=entry.get("schema"),
        name=entry.get("name"),
        required=bool(entry.get("required", False)),
        classifier=classifier,
    )
    (reporter or default_reporter).report(field)
    return field


def build_fields(
    entries: Iterable[Mapping],
    classifier: Optional[SchemaClassifier] = None,
    reporter: Optional[FallbackReporter] = None,
) -> List[Field]:
    """Build Fields for every metadata entry, preserving input order."""
    return [build_field(entry, classifier=classifier, reporter=reporter) for entry in entries]


def _index_fields(fields: Iterable[Field], case_insensitive: bool) -> Dict[str, Field]:
    index: Dict[str, Field] = {}
    # Keys take precedence over display names
    for field in fields:
        index.setdefault(field.name, field)
    for field in fields:
        index[field.key] = field
    if case_insensitive:
        index = {label.lower(): field for label, field in index.items()}
    return index


def _suggest(raw_key: str, fields: List[Field]) -> List[str]:
    labels = {field.name: field.name for field in fields}
    labels.update({field.key: field.name for field in fields})
    matches = difflib.get_close_matches(raw_key, list(labels), n=len(labels), cutoff=0.0)
    suggestions: List[str] = []
    for match in matches:
        name = labels[match]
        if name not in suggestions:
            suggestions.append(name)
        if len(suggestions) == SUGGESTION_LIMIT:
            break
    return suggestions


def format_values(
    fields: Iterable[Field],
    values: Mapping[str, Any],
    case_insensitive: bool = False,
    omit_empty: bool = False,
    suggest_on_unknown: bool = False,
) -> FormatValuesResult:
    """Format a batch of raw values keyed by field key or name.

    Each field is formatted independently: a hard failure is recorded in
    ``errors`` and a value that converts to null is recorded in ``omitted``
    (with a warning); neither stops the rest of the batch.
    """
    fields = list(fields)
    index = _index_fields(fields, case_insensitive)
    result = FormatValuesResult()

    for field in fields:
        if field.is_fallback:
            result.warnings.append(FieldIssue(
                code=ValidationCode.SCHEMA_FALLBACK,
                field=field.key,
                message=field.classification.reason or "Schema not recognized",
            ))

    for raw_key, raw_value in values.items():
        lookup = raw_key.lower() if case_insensitive else raw_key
        field = index.get(lookup)
        if field is None:
            result.unknown.append(raw_key)
            result.warnings.append(FieldIssue(
                code=ValidationCode.UNKNOWN_FIELD,
                field=raw_key,
                message=f"No field matches '{raw_key}'",
                value=raw_value,
            ))
            if suggest_on_unknown:
                result.suggestions.append(FieldSuggestion(input=raw_key, suggestions=_suggest(raw_key, fields)))
            continue

        if omit_empty and field.is_empty(raw_value):
            continue

        try:
            formatted = field.format(raw_value)
        except FieldFormatterError as e:
            result.errors.append(FieldIssue(
                code=ValidationCode.FORMAT_ERROR,
                field=field.key,
                message=str(e),
                value=raw_value,
            ))
            continue

        if formatted is None:
            if not field.is_empty(raw_value):
                logger.debug("Value for %s could not be converted to %s: %r", field.key, field.field_type.value, raw_value)
                result.omitted.append(field.key)
                result.warnings.append(FieldIssue(
                    code=ValidationCode.UNCONVERTIBLE_VALUE,
                    field=field.key,
                    message=f"Value could not be converted to {field.field_type.value}",
                    value=raw_value,
                ))
            continue

        result.fields[field.key] = formatted

    return result


def validate_values(fields: Iterable[Field], values: Mapping[str, Any]) -> ValuesValidationReport:
    """Validate raw values (looked up by key, then by name) against every field."""
    errors: List[FieldIssue] = []
    missing_required: List[str] = []

    for field in fields:
        if field.key in values:
            candidate = values[field.key]
        else:
            candidate = values.get(field.name)
        result = field.validate(candidate)
        if result.valid:
            continue
        if field.required and field.is_empty(candidate):
            missing_required.append(field.key)
            code = ValidationCode.REQUIRED
        else:
            code = ValidationCode.INVALID_VALUE
        for message in result.errors:
            errors.append(FieldIssue(code=code, field=field.key, message=message, value=candidate))

    return ValuesValidationReport(valid=not errors, errors=errors, missing_required=missing_required)


def get_field_type_info(field_type: Any) -> FieldTypeInfo:
    """Describe a field type; raises InvalidFieldTypeError for unknown tags."""
    if not is_valid_field_type(field_type):
        raise InvalidFieldTypeError(f"Invalid field type: {field_type}")
    resolved = coerce_field_type(field_type)
    return FieldTypeInfo(
        field_type=resolved,
        format=get_field_format(resolved),
        is_array=resolved is FieldType.ARRAY,
        requires_array_type=resolved is FieldType.ARRAY,
        description=FIELD_TYPE_DESCRIPTIONS[resolved],
    )
