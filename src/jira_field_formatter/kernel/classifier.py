"""Schema classifier: maps a tracker schema descriptor onto the field-type taxonomy.

Descriptors come from the tracker's metadata endpoints and their shape varies
across server versions and vendors. Classification runs an ordered chain of
rules and the first rule that matches wins. The order is part of the
contract because several rules can match the same descriptor:

1. direct type match (``type`` names a recognized primitive)
2. array rule (``type == "array"``, item classified recursively)
3. system-name fallback (``system`` names a recognized primitive)
4. custom identifier heuristics (``custom`` substrings, ``cascadingselect``
   before ``select``)
5. caller-supplied extra rules
6. explicit failure (UnrecognizedSchemaError)

Results are memoized per descriptor object identity, not per content.
"""

import threading
from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import (
    ArrayItemSchemaError,
    InvalidSchemaError,
    MissingArrayItemsError,
    SchemaClassificationError,
    UnrecognizedSchemaError,
)
from .field_types import FIELD_TYPES, FieldType


RECOGNIZED_PRIMITIVES = frozenset(FIELD_TYPES - {FieldType.ARRAY})


class ClassificationResult(BaseModel):
    """Field type (and array item type) inferred from a schema descriptor."""
    field_type: FieldType
    array_item_type: Optional[FieldType] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def validate_array_item_type(self):
        """array_item_type is present iff field_type is ARRAY, and is never ARRAY."""
        if self.field_type is FieldType.ARRAY:
            if self.array_item_type is None:
                raise ValueError("array classification requires an array_item_type")
            if self.array_item_type is FieldType.ARRAY:
                raise ValueError("nested arrays are not supported")
        elif self.array_item_type is not None:
            raise ValueError(
                f"array_item_type is only allowed for array fields (got {self.array_item_type.value} "
                f"for {self.field_type.value})"
            )
        return self


class ClassificationOutcome(BaseModel):
    """Classification result plus whether it was inferred or defaulted to ANY."""
    result: ClassificationResult
    fallback: bool = False
    reason: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def matched(cls, result: ClassificationResult) -> "ClassificationOutcome":
        return cls(result=result)

    @classmethod
    def defaulted(cls, reason: str) -> "ClassificationOutcome":
        return cls(result=ClassificationResult(field_type=FieldType.ANY), fallback=True, reason=reason)

    @property
    def field_type(self) -> FieldType:
        return self.result.field_type

    @property
    def array_item_type(self) -> Optional[FieldType]:
        return self.result.array_item_type


class ClassifierConfig(BaseModel):
    """Classifier settings."""
    cache_size: int = Field(1024, ge=0, description="Maximum memoized descriptors (0 disables memoization)")

    model_config = ConfigDict(extra="forbid")


def unwrap_schema(schema: Any) -> Mapping:
    """Return the descriptor mapping, unwrapping a ``{"schema": {...}}`` field entry."""
    if not isinstance(schema, Mapping):
        raise InvalidSchemaError(
            f"Invalid schema: expected mapping, got {type(schema).__name__}"
        )
    inner = schema.get("schema")
    if isinstance(inner, Mapping):
        return inner
    return schema


# Rule variants. Each returns a ClassificationResult when it matches, None otherwise.

@dataclass(frozen=True)
class DirectTypeRule:
    """``type`` names a recognized primitive."""
    name: str = "direct_type"

    def match(self, descriptor: Mapping, classifier: "SchemaClassifier") -> Optional[ClassificationResult]:
        field_type = _recognized(descriptor.get("type"))
        if field_type is None:
            return None
        return ClassificationResult(field_type=field_type)


@dataclass(frozen=True)
class ArrayItemsRule:
    """``type == "array"``; items given as a bare type name or as a nested descriptor."""
    name: str = "array_items"

    def match(self, descriptor: Mapping, classifier: "SchemaClassifier") -> Optional[ClassificationResult]:
        if descriptor.get("type") != FieldType.ARRAY.value:
            return None
        items = descriptor.get("items")
        if items is None or items == "" or (isinstance(items, Mapping) and not items):
            raise MissingArrayItemsError()
        try:
            item_type = classifier.classify_item(items)
        except SchemaClassificationError as e:
            raise ArrayItemSchemaError(str(e)) from e
        return ClassificationResult(field_type=FieldType.ARRAY, array_item_type=item_type)


@dataclass(frozen=True)
class SystemNameRule:
    """``system`` pins a recognized primitive when ``type`` is too generic."""
    name: str = "system_name"

    def match(self, descriptor: Mapping, classifier: "SchemaClassifier") -> Optional[ClassificationResult]:
        field_type = _recognized(descriptor.get("system"))
        if field_type is None:
            return None
        return ClassificationResult(field_type=field_type)


@dataclass(frozen=True)
class CustomIdentifierRule:
    """Case-insensitive substring match on the vendor ``custom`` identifier."""
    substring: str
    field_type: FieldType
    name: str = "custom_identifier"

    def match(self, descriptor: Mapping, classifier: "SchemaClassifier") -> Optional[ClassificationResult]:
        custom = descriptor.get("custom")
        if not isinstance(custom, str) or self.substring not in custom.lower():
            return None
        return ClassificationResult(field_type=self.field_type)


ClassificationRule = Union[DirectTypeRule, ArrayItemsRule, SystemNameRule, CustomIdentifierRule]

DEFAULT_RULES: Tuple[ClassificationRule, ...] = (
    DirectTypeRule(),
    ArrayItemsRule(),
    SystemNameRule(),
    CustomIdentifierRule("cascadingselect", FieldType.OPTION_WITH_CHILD),
    CustomIdentifierRule("select", FieldType.OPTION),
    CustomIdentifierRule("userpicker", FieldType.USER),
)


def _recognized(value: Any) -> Optional[FieldType]:
    if not isinstance(value, str):
        return None
    try:
        field_type = FieldType(value)
    except ValueError:
        return None
    return field_type if field_type in RECOGNIZED_PRIMITIVES else None


class SchemaClassifier:
    """Ordered rule chain with an identity-keyed memo of results."""

    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        extra_rules: Sequence[Any] = (),
    ):
        self.config = config or ClassifierConfig()
        # Extra rules run after the built-ins and before the fallback
        self.rules: Tuple[Any, ...] = DEFAULT_RULES + tuple(extra_rules)
        # id(descriptor) -> (descriptor, result); holding the descriptor keeps its id from being reused
        self._cache: "OrderedDict[int, Tuple[Any, ClassificationResult]]" = OrderedDict()
        self._lock = threading.Lock()

    def classify(self, schema: Any) -> ClassificationResult:
        """Classify a schema descriptor, raising SchemaClassificationError when nothing matches."""
        cached = self._lookup(schema)
        if cached is not None:
            return cached

        descriptor = unwrap_schema(schema)
        result = self._run_rules(descriptor)
        self._store(schema, result)
        return result

    def classify_outcome(self, schema: Any) -> ClassificationOutcome:
        """Classify without raising: failures become an ANY fallback carrying the reason."""
        try:
            return ClassificationOutcome.matched(self.classify(schema))
        except SchemaClassificationError as e:
            return ClassificationOutcome.defaulted(str(e))

    def classify_item(self, items: Any) -> FieldType:
        """Classify an array item descriptor (bare type name or nested descriptor)."""
        if isinstance(items, str):
            if items == FieldType.CHECKLIST_ITEM.value:
                return FieldType.CHECKLIST_ITEM
            result = self._run_rules({"type": items})
        else:
            descriptor = unwrap_schema(items)
            if descriptor.get("type") == FieldType.CHECKLIST_ITEM.value:
                return FieldType.CHECKLIST_ITEM
            result = self.classify(items)
        if result.field_type is FieldType.ARRAY:
            raise SchemaClassificationError("nested arrays are not supported")
        return result.field_type

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    @property
    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    def _run_rules(self, descriptor: Mapping) -> ClassificationResult:
        for rule in self.rules:
            result = rule.match(descriptor, self)
            if result is not None:
                return result
        custom = descriptor.get("custom")
        raise UnrecognizedSchemaError(
            descriptor.get("type"),
            custom if isinstance(custom, str) else None,
        )

    def _lookup(self, schema: Any) -> Optional[ClassificationResult]:
        if self.config.cache_size == 0:
            return None
        with self._lock:
            entry = self._cache.get(id(schema))
            if entry is None or entry[0] is not schema:
                return None
            self._cache.move_to_end(id(schema))
            return entry[1]

    def _store(self, schema: Any, result: ClassificationResult) -> None:
        if self.config.cache_size == 0:
            return
        with self._lock:
            self._cache[id(schema)] = (schema, result)
            self._cache.move_to_end(id(schema))
            while len(self._cache) > self.config.cache_size:
                self._cache.popitem(last=False)


default_classifier = SchemaClassifier()


def classify(schema: Any) -> ClassificationResult:
    """Classify with the module-level default classifier."""
    return default_classifier.classify(schema)


def classify_outcome(schema: Any) -> ClassificationOutcome:
    """Classify with the default classifier, downgrading failures to ANY."""
    return default_classifier.classify_outcome(schema)
