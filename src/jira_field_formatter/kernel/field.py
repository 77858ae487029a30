"""Field entity: one schema bound to one key, with format/validate/is_empty."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, model_validator

from .classifier import ClassificationOutcome, SchemaClassifier, default_classifier
from .field_types import FieldFormat, FieldType, get_field_format
from .formatter import format_value
from .validation import ValidationResult, is_empty, validate_field_types, validate_value_for_field_type


class Field(BaseModel):
    """A tracker field whose type was inferred from its schema descriptor.

    Construction never fails on schema variability: an unrecognized
    descriptor yields an ANY field whose ``classification`` records the
    fallback and its reason. A custom classifier can be passed through the
    validation context (``Field.model_validate(data, context={"classifier": c})``)
    or via ``Field.from_schema``.
    """
    key: str
    name: str
    required: bool = False
    raw_schema: Any = None  # Kept by identity for diagnostics; never re-classified
    field_type: FieldType = FieldType.ANY
    array_item_type: Optional[FieldType] = None
    classification: Optional[ClassificationOutcome] = None  # None when types were given explicitly

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def classify_schema(cls, data: Any, info: ValidationInfo) -> Any:
        """Derive field_type/array_item_type from the schema unless given explicitly."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "schema" in data:
            data["raw_schema"] = data.pop("schema")
        if not data.get("name"):
            data["name"] = data.get("key")
        data["required"] = bool(data.get("required", False))

        if "field_type" in data:
            return data

        classifier = default_classifier
        if info.context and isinstance(info.context.get("classifier"), SchemaClassifier):
            classifier = info.context["classifier"]

        schema = data.get("raw_schema")
        if schema is None:
            outcome = ClassificationOutcome.defaulted("No schema descriptor provided")
        else:
            outcome = classifier.classify_outcome(schema)
        data["field_type"] = outcome.field_type
        data["array_item_type"] = outcome.array_item_type
        data["classification"] = outcome
        return data

    @model_validator(mode="after")
    def validate_type_pairing(self):
        """Explicitly supplied types must form a legal pair."""
        check = validate_field_types(self.field_type, self.array_item_type)
        if not check.is_valid:
            raise ValueError(check.error)
        return self

    @classmethod
    def from_schema(
        cls,
        key: str,
        schema: Any,
        name: Optional[str] = None,
        required: bool = False,
        classifier: Optional[SchemaClassifier] = None,
    ) -> "Field":
        data = {"key": key, "name": name, "required": required, "schema": schema}
        context = {"classifier": classifier} if classifier is not None else None
        return cls.model_validate(data, context=context)

    @property
    def is_fallback(self) -> bool:
        """True if the schema was not recognized and the field defaulted to ANY."""
        return bool(self.classification and self.classification.fallback)

    @property
    def format_family(self) -> FieldFormat:
        return get_field_format(self.field_type)

    def format(self, value: Any) -> Any:
        """Format value into this field's payload shape."""
        return format_value(value, self.field_type, self.array_item_type)

    # Shadows pydantic's deprecated BaseModel.validate classmethod; build instances with model_validate
    def validate(self, value: Any) -> ValidationResult:
        """Required-ness plus light-touch acceptance; never raises."""
        if self.is_empty(value):
            if self.required:
                return ValidationResult(valid=False, errors=[f"Value is required for field '{self.name}'"])
            return ValidationResult(valid=True, errors=[])
        check = validate_value_for_field_type(value, self.field_type)
        if not check.is_valid:
            return ValidationResult(valid=False, errors=[check.error])
        return ValidationResult(valid=True, errors=[])

    def is_empty(self, value: Any) -> bool:
        return is_empty(value)
