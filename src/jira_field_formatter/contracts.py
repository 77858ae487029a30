"""Public result models for jira_field_formatter.api."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from jira_field_formatter.codes import ValidationCode
from jira_field_formatter.kernel.field_types import FieldFormat, FieldType


class FieldIssue(BaseModel):
    """A problem found for one field during batch formatting or validation."""
    code: ValidationCode
    field: str  # Field key, or the raw input key for unknown fields
    message: str
    value: Optional[Any] = None  # Offending raw value, when there is one


class FieldSuggestion(BaseModel):
    """Close matches for an input key that matched no field."""
    input: str
    suggestions: List[str]  # Best match first


class FormatValuesResult(BaseModel):
    """Per-field outcome of formatting a batch of raw values."""
    fields: Dict[str, Any] = Field(default_factory=dict)  # field key -> payload value
    errors: List[FieldIssue] = Field(default_factory=list)  # hard failures; field omitted
    warnings: List[FieldIssue] = Field(default_factory=list)  # soft failures and schema fallbacks
    omitted: List[str] = Field(default_factory=list)  # keys whose value converted to null
    unknown: List[str] = Field(default_factory=list)  # input keys matching no field
    suggestions: List[FieldSuggestion] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class ValuesValidationReport(BaseModel):
    """Result of validating a batch of raw values against their fields."""
    valid: bool
    errors: List[FieldIssue]
    missing_required: List[str]  # keys, in field order


class FieldTypeInfo(BaseModel):
    """Description of one field type."""
    field_type: FieldType
    format: FieldFormat
    is_array: bool
    requires_array_type: bool
    description: str
