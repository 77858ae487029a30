"""Performance sentinel workloads and budgets (gated perf tests)."""

from __future__ import annotations

import os
from typing import Any, Dict, List

from jira_field_formatter.api import build_fields, format_values
from jira_field_formatter.contracts import FormatValuesResult
from jira_field_formatter.kernel.classifier import SchemaClassifier
from jira_field_formatter.kernel.field import Field


def _budget_from_env(var_name: str, default_ms: float) -> float:
    raw = os.getenv(var_name)
    if not raw:
        return default_ms
    try:
        return float(raw)
    except ValueError:
        return default_ms


MAX_BULK_CLASSIFY_MS = _budget_from_env("JFF_MAX_BULK_CLASSIFY_MS", 500.0)
MAX_BULK_FORMAT_MS = _budget_from_env("JFF_MAX_BULK_FORMAT_MS", 1500.0)

_SCHEMA_SHAPES: List[Dict[str, Any]] = [
    {"type": "string", "system": "summary"},
    {"type": "number", "custom": "com.atlassian.jira.plugin.system.customfieldtypes:float"},
    {"type": "date", "system": "duedate"},
    {"type": "array", "items": "version", "system": "fixVersions"},
    {"type": "array", "items": {"type": "string"}, "system": "labels"},
    {"type": "option-with-child", "custom": "com.atlassian.jira.plugin.system.customfieldtypes:cascadingselect"},
]

_RAW_VALUES = [
    "  Release blocker  ",
    "12.5",
    "45290",
    "v1.0, v2.0, v3.0",
    "csv, style, testing",
    "Hardware -> Laptop",
]


def metadata_entries(count: int) -> List[Dict[str, Any]]:
    """Metadata entries cycling through the shared schema shapes (descriptor objects are reused)."""
    return [
        {
            "id": f"customfield_{10000 + i}",
            "name": f"Field {i}",
            "required": i % 7 == 0,
            "schema": _SCHEMA_SHAPES[i % len(_SCHEMA_SHAPES)],
        }
        for i in range(count)
    ]


def classify_bulk(count: int) -> List[Field]:
    return build_fields(metadata_entries(count), classifier=SchemaClassifier())


def format_bulk(count: int) -> FormatValuesResult:
    fields = classify_bulk(count)
    values = {field.key: _RAW_VALUES[i % len(_RAW_VALUES)] for i, field in enumerate(fields)}
    return format_values(fields, values)
