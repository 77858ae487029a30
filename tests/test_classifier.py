"""Tests for schema classification: rule order, array items, memoization, fallback."""

import pytest
from pydantic import ValidationError

from jira_field_formatter.kernel.classifier import (
    ClassificationOutcome,
    ClassificationResult,
    ClassifierConfig,
    CustomIdentifierRule,
    SchemaClassifier,
    unwrap_schema,
)
from jira_field_formatter.kernel.errors import (
    ArrayItemSchemaError,
    InvalidSchemaError,
    MissingArrayItemsError,
    SchemaClassificationError,
    StructuralConfigError,
    UnrecognizedSchemaError,
)
from jira_field_formatter.kernel.field_types import FieldType


class TestRuleOrder:
    """First matching rule wins."""

    def test_direct_type(self, classifier):
        result = classifier.classify({"type": "string", "system": "summary"})
        assert result.field_type is FieldType.STRING
        assert result.array_item_type is None

    def test_direct_type_beats_custom(self, classifier):
        """A recognized type wins over a custom identifier that would say otherwise."""
        result = classifier.classify({
            "type": "user",
            "custom": "com.atlassian.jira.plugin.system.customfieldtypes:select",
        })
        assert result.field_type is FieldType.USER

    def test_system_name_fallback(self, classifier):
        result = classifier.classify({"type": "something-generic", "system": "timetracking"})
        assert result.field_type is FieldType.TIME_TRACKING

    def test_system_name_cannot_produce_array(self, classifier):
        with pytest.raises(UnrecognizedSchemaError):
            classifier.classify({"type": "weird", "system": "array"})

    def test_cascadingselect_before_select(self, classifier):
        """The cascading identifier also contains "select"; it must be checked first."""
        result = classifier.classify({
            "type": "option-thing",
            "custom": "com.atlassian.jira.plugin.system.customfieldtypes:cascadingselect",
        })
        assert result.field_type is FieldType.OPTION_WITH_CHILD

    def test_select_custom(self, classifier):
        result = classifier.classify({
            "type": "vendor-option",
            "custom": "com.atlassian.jira.plugin.system.customfieldtypes:multiselect",
        })
        assert result.field_type is FieldType.OPTION

    def test_custom_match_is_case_insensitive(self, classifier):
        result = classifier.classify({"type": "x", "custom": "com.vendor:UserPicker"})
        assert result.field_type is FieldType.USER

    def test_unwraps_field_entry(self, classifier):
        result = classifier.classify({"fieldId": "duedate", "schema": {"type": "date"}})
        assert result.field_type is FieldType.DATE


class TestArrays:

    def test_bare_item_name(self, classifier):
        result = classifier.classify({"type": "array", "items": "version"})
        assert result.field_type is FieldType.ARRAY
        assert result.array_item_type is FieldType.VERSION

    def test_nested_item_descriptor(self, classifier):
        result = classifier.classify({"type": "array", "items": {"type": "string"}})
        assert result.array_item_type is FieldType.STRING

    @pytest.mark.parametrize("item_type", [
        "string", "number", "version", "component", "user", "option",
        "issuelinks", "project", "date", "datetime", "any", "checklist-item",
    ])
    def test_bare_and_nested_item_encodings_agree(self, classifier, item_type):
        bare = classifier.classify({"type": "array", "items": item_type})
        nested = classifier.classify({"type": "array", "items": {"type": item_type}})
        assert bare == nested
        assert bare.array_item_type.value == item_type

    def test_nested_item_uses_custom_rules(self, classifier):
        result = classifier.classify({
            "type": "array",
            "items": {"type": "x", "custom": "com.vendor:multiuserpicker"},
        })
        assert result.array_item_type is FieldType.USER

    def test_checklist_items(self, classifier):
        result = classifier.classify({"type": "array", "items": "checklist-item"})
        assert result.array_item_type is FieldType.CHECKLIST_ITEM

    def test_checklist_item_descriptor(self, classifier):
        result = classifier.classify({"type": "array", "items": {"type": "checklist-item"}})
        assert result.array_item_type is FieldType.CHECKLIST_ITEM

    @pytest.mark.parametrize("items", [None, "", {}])
    def test_missing_items(self, classifier, items):
        schema = {"type": "array"}
        if items is not None:
            schema["items"] = items
        with pytest.raises(MissingArrayItemsError, match="Array schema missing items definition"):
            classifier.classify(schema)

    def test_missing_items_is_structural(self, classifier):
        with pytest.raises(StructuralConfigError):
            classifier.classify({"type": "array"})

    def test_unrecognized_item(self, classifier):
        with pytest.raises(ArrayItemSchemaError, match="Failed to map array item schema: Unsupported"):
            classifier.classify({"type": "array", "items": "gizmo"})

    def test_nested_arrays_rejected(self, classifier):
        with pytest.raises(ArrayItemSchemaError, match="nested arrays"):
            classifier.classify({"type": "array", "items": {"type": "array", "items": "string"}})

    def test_bare_array_item_rejected(self, classifier):
        with pytest.raises(ArrayItemSchemaError):
            classifier.classify({"type": "array", "items": "array"})


class TestFailure:

    def test_unrecognized_message(self, classifier):
        with pytest.raises(UnrecognizedSchemaError) as exc_info:
            classifier.classify({"type": "sd-feedback", "custom": "com.vendor:feedback"})
        assert str(exc_info.value) == "Unsupported schema mapping (type=sd-feedback, custom=com.vendor:feedback)"
        assert exc_info.value.schema_type == "sd-feedback"

    def test_unrecognized_without_custom(self, classifier):
        with pytest.raises(UnrecognizedSchemaError, match=r"custom=n/a"):
            classifier.classify({"type": "mystery"})

    @pytest.mark.parametrize("schema", [None, "string", 42, ["string"]])
    def test_non_mapping_schema(self, classifier, schema):
        with pytest.raises(InvalidSchemaError):
            classifier.classify(schema)

    def test_checklist_item_is_not_a_field_type(self, classifier):
        with pytest.raises(UnrecognizedSchemaError):
            classifier.classify({"type": "checklist-item"})

    def test_outcome_defaults_to_any(self, classifier):
        outcome = classifier.classify_outcome({"type": "mystery"})
        assert outcome.fallback
        assert outcome.field_type is FieldType.ANY
        assert outcome.array_item_type is None
        assert "Unsupported schema mapping" in outcome.reason

    def test_outcome_matched(self, classifier):
        outcome = classifier.classify_outcome({"type": "number"})
        assert not outcome.fallback
        assert outcome.reason is None
        assert outcome.field_type is FieldType.NUMBER


class TestMemoization:

    def test_same_object_hits_cache(self, classifier):
        schema = {"type": "array", "items": "string"}
        first = classifier.classify(schema)
        assert classifier.cache_size == 1
        assert classifier.classify(schema) is first
        assert classifier.cache_size == 1

    def test_equal_content_different_object_is_classified_again(self, classifier):
        classifier.classify({"type": "string"})
        classifier.classify({"type": "string"})
        assert classifier.cache_size == 2

    def test_failures_are_not_cached(self, classifier):
        schema = {"type": "mystery"}
        with pytest.raises(SchemaClassificationError):
            classifier.classify(schema)
        assert classifier.cache_size == 0

    def test_cache_is_bounded(self):
        classifier = SchemaClassifier(ClassifierConfig(cache_size=2))
        schemas = [{"type": "string"}, {"type": "number"}, {"type": "date"}]
        for schema in schemas:
            classifier.classify(schema)
        assert classifier.cache_size == 2

    def test_cache_disabled(self):
        classifier = SchemaClassifier(ClassifierConfig(cache_size=0))
        schema = {"type": "string"}
        classifier.classify(schema)
        assert classifier.cache_size == 0

    def test_clear_cache(self, classifier):
        classifier.classify({"type": "string"})
        classifier.clear_cache()
        assert classifier.cache_size == 0

    def test_negative_cache_size_rejected(self):
        with pytest.raises(ValidationError):
            ClassifierConfig(cache_size=-1)


def test_extra_rules_run_after_builtins():
    """Extra rules see only descriptors the built-ins did not claim."""
    classifier = SchemaClassifier(extra_rules=[CustomIdentifierRule("feedback", FieldType.STRING)])
    assert classifier.classify({"type": "x", "custom": "com.vendor:feedback"}).field_type is FieldType.STRING
    # Built-in select rule still wins for its identifiers
    assert classifier.classify({"type": "x", "custom": "vendor:select-feedback"}).field_type is FieldType.OPTION


def test_unwrap_schema_returns_descriptor_itself():
    descriptor = {"type": "string"}
    assert unwrap_schema(descriptor) is descriptor


class TestResultInvariants:

    def test_array_requires_item_type(self):
        with pytest.raises(ValidationError):
            ClassificationResult(field_type=FieldType.ARRAY)

    def test_item_type_only_for_arrays(self):
        with pytest.raises(ValidationError):
            ClassificationResult(field_type=FieldType.STRING, array_item_type=FieldType.STRING)

    def test_nested_array_result_rejected(self):
        with pytest.raises(ValidationError):
            ClassificationResult(field_type=FieldType.ARRAY, array_item_type=FieldType.ARRAY)

    def test_results_are_frozen(self):
        result = ClassificationResult(field_type=FieldType.STRING)
        with pytest.raises(ValidationError):
            result.field_type = FieldType.NUMBER

    def test_defaulted_outcome(self):
        outcome = ClassificationOutcome.defaulted("no schema")
        assert outcome.fallback and outcome.reason == "no schema"
        assert outcome.field_type is FieldType.ANY
