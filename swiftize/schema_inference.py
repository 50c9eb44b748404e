"""Record schema inference for JSON documents.

Walks a decoded JSON object and produces a flat, ordered collection of
named record schemas, one per distinct nested object name. Nested objects
become references to generated records; arrays are typed from their first
element, or from all elements when sampling is enabled.

Records are appended children first: a record lands in the collection only
after every record it introduced, so rendered output defines inner types
before outer ones.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from swiftize.common import capitalize_first, element_type_name, get_tree_hash, swift_name
from swiftize.json_value import JsonKind, JsonNode, json_kind

logger = logging.getLogger(__name__)

DEDUPE_MODES = ('name', 'structure')


class ScalarKind(Enum):
    """Semantic kinds for leaf values."""
    STRING = 'string'
    BOOL = 'bool'
    INT = 'int'
    DOUBLE = 'double'
    OPTIONAL_STRING = 'optional_string'
    ANY = 'any'


@dataclass(frozen=True)
class Scalar:
    """A leaf type."""
    kind: ScalarKind


@dataclass(frozen=True)
class ArrayOf:
    """A homogeneous array."""
    items: 'TypeDescriptor'


@dataclass(frozen=True)
class InlineObject:
    """An object with no generated record, typed as an untyped dictionary."""


@dataclass(frozen=True)
class NamedRecord:
    """Reference by name to a record held in the schema collection."""
    name: str


@dataclass(frozen=True)
class OptionalOf:
    """A value that may be absent or null."""
    inner: 'TypeDescriptor'


TypeDescriptor = Union[Scalar, ArrayOf, InlineObject, NamedRecord, OptionalOf]

ANY_ARRAY = ArrayOf(Scalar(ScalarKind.ANY))


@dataclass
class RecordField:
    """A field of a record; json_name is the key it was read from."""
    name: str
    type: TypeDescriptor
    json_name: str


@dataclass
class RecordSchema:
    """A named record inferred from one object shape."""
    name: str
    fields: List[RecordField] = field(default_factory=list)
    source_keys: List[str] = field(default_factory=list)


@dataclass
class SchemaCollection:
    """Ordered records of one document plus the names already claimed."""
    records: List[RecordSchema] = field(default_factory=list)
    used_names: Set[str] = field(default_factory=set)
    fingerprints: Dict[str, bytes] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def register(self, name: str, fingerprint: Optional[bytes] = None) -> None:
        self.used_names.add(name)
        if fingerprint is not None:
            self.fingerprints[name] = fingerprint

    def append(self, record: RecordSchema) -> None:
        self.records.append(record)

    def names(self) -> List[str]:
        return [record.name for record in self.records]

    def get(self, name: str) -> Optional[RecordSchema]:
        return next((record for record in self.records if record.name == name), None)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def __iter__(self):
        return iter(self.records)

    def __len__(self):
        return len(self.records)


@dataclass
class SampledValue:
    """All values seen for one key across a set of folded objects."""
    values: List[Any]
    missing: bool = False


def fold_objects(objects: List[Mapping[str, Any]]) -> Dict[str, SampledValue]:
    """Folds several objects into one, collecting every value per key.

    Keys keep their first-seen order. A key that is absent from at least
    one of the objects is marked as missing.
    """
    folded: Dict[str, SampledValue] = {}
    for obj in objects:
        for key, value in obj.items():
            folded.setdefault(key, SampledValue([])).values.append(value)
    for sample in folded.values():
        if len(sample.values) < len(objects):
            sample.missing = True
    return folded


def make_optional(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Wraps a descriptor as optional unless it already is."""
    if isinstance(descriptor, OptionalOf) or descriptor == Scalar(ScalarKind.OPTIONAL_STRING):
        return descriptor
    if descriptor == Scalar(ScalarKind.STRING):
        return Scalar(ScalarKind.OPTIONAL_STRING)
    return OptionalOf(descriptor)


PendingRecords = List[Tuple[Mapping[str, Any], str]]


class SwiftSchemaInferrer:
    """Infers record schemas from decoded JSON objects."""

    def __init__(self, dedupe: str = 'name', sample_arrays: bool = False):
        """Initialize the inferrer.

        Args:
            dedupe: 'name' lets the first object to claim a record name win
                and silently skips later objects with that name. 'structure'
                fingerprints each object and gives differently shaped objects
                their own, disambiguated record names.
            sample_arrays: Type arrays from all of their elements instead of
                only the first one.
        """
        if dedupe not in DEDUPE_MODES:
            raise ValueError(f"Unknown dedupe mode '{dedupe}', expected one of {', '.join(DEDUPE_MODES)}")
        self.dedupe = dedupe
        self.sample_arrays = sample_arrays

    def classify_scalar(self, value: JsonNode) -> Scalar:
        """Maps a JSON scalar to its scalar type."""
        if isinstance(value, str):
            return Scalar(ScalarKind.STRING)
        if isinstance(value, bool):
            return Scalar(ScalarKind.BOOL)
        if isinstance(value, int):
            return Scalar(ScalarKind.INT)
        if isinstance(value, float):
            return Scalar(ScalarKind.DOUBLE)
        if value is None:
            return Scalar(ScalarKind.OPTIONAL_STRING)
        return Scalar(ScalarKind.ANY)

    def infer_records(self, obj: Mapping[str, Any], root_name: str) -> SchemaCollection:
        """Infers the records for an object and everything nested in it.

        Args:
            obj: Decoded JSON object
            root_name: Record name for the object itself

        Returns:
            A new collection, children before parents, root record last
        """
        collection = SchemaCollection()
        self._collect_record(obj, root_name, collection)
        return collection

    def infer_array_records(self, values: List[JsonNode], root_name: str) -> Optional[SchemaCollection]:
        """Infers the element records of a top level array.

        Returns None unless the first element is an object. When sampling,
        all object elements are folded into the element record.
        """
        if not values or not isinstance(values[0], dict):
            return None
        if not self.sample_arrays:
            return self.infer_records(values[0], root_name)
        objects = [v for v in values if isinstance(v, dict)]
        collection = SchemaCollection()
        if len(objects) < len(values):
            collection.warn(f"{root_name}: {len(values) - len(objects)} top level array elements are not objects and were ignored")
        self._collect_record(fold_objects(objects), root_name, collection)
        return collection

    def _collect_record(self, obj: Mapping[str, Any], name: str, collection: SchemaCollection, claimed: bool = False) -> None:
        if not claimed:
            if name in collection.used_names:
                logger.debug("Record '%s' already generated, skipping object", name)
                return
            collection.register(name, self._fingerprint(obj) if self.dedupe == 'structure' else None)

        fields: List[RecordField] = []
        pending: PendingRecords = []
        for key in sorted(obj, key=lambda k: (swift_name(k), k)):
            field_name = swift_name(key)
            field_type = self._field_type(obj[key], field_name, name, pending, collection)
            fields.append(RecordField(field_name, field_type, key))

        for child, child_name in pending:
            self._collect_record(child, child_name, collection, claimed=self.dedupe == 'structure')

        collection.append(RecordSchema(name, fields, list(obj.keys())))

    def _field_type(self, value: Any, field_name: str, parent_name: str,
                    pending: PendingRecords, collection: SchemaCollection) -> TypeDescriptor:
        if isinstance(value, SampledValue):
            descriptor = self._unify(value.values, capitalize_first(field_name), element_type_name(field_name),
                                     f"{parent_name}.{field_name}", parent_name, pending, collection)
            return make_optional(descriptor) if value.missing else descriptor
        if isinstance(value, dict):
            return self._nested_record(value, capitalize_first(field_name), parent_name, pending, collection)
        if isinstance(value, list):
            return self._array_type(value, field_name, parent_name, pending, collection)
        return self.classify_scalar(value)

    def _array_type(self, values: List[JsonNode], field_name: str, parent_name: str,
                    pending: PendingRecords, collection: SchemaCollection) -> TypeDescriptor:
        if not values:
            return ANY_ARRAY
        if self.sample_arrays:
            return ArrayOf(self._unify(values, element_type_name(field_name), None,
                                       f"{parent_name}.{field_name}", parent_name, pending, collection))
        first = values[0]
        if isinstance(first, dict):
            return ArrayOf(self._nested_record(first, element_type_name(field_name), parent_name, pending, collection))
        return ArrayOf(self._element_type(first))

    def _element_type(self, value: JsonNode) -> TypeDescriptor:
        """Types a value nested in an array with no record name to give it."""
        if isinstance(value, dict):
            return InlineObject()
        if isinstance(value, list):
            return ArrayOf(self._element_type(value[0])) if value else ANY_ARRAY
        return self.classify_scalar(value)

    def _nested_record(self, obj: Mapping[str, Any], name: str, parent_name: str,
                       pending: PendingRecords, collection: SchemaCollection) -> NamedRecord:
        if self.dedupe == 'structure':
            name, is_new = self._claim(obj, name, parent_name, collection)
            if not is_new:
                return NamedRecord(name)
        pending.append((obj, name))
        return NamedRecord(name)

    def _claim(self, obj: Mapping[str, Any], name: str, parent_name: str,
               collection: SchemaCollection) -> Tuple[str, bool]:
        """Finds the record name for an object shape.

        Returns the name and whether the record still has to be generated.
        """
        fingerprint = self._fingerprint(obj)
        candidate, attempt = name, 1
        while candidate in collection.used_names:
            if collection.fingerprints.get(candidate) == fingerprint:
                return candidate, False
            attempt += 1
            # Name, ParentName, ParentName2, ParentName3, ...
            candidate = parent_name + name if attempt == 2 else f"{parent_name}{name}{attempt - 1}"
        if candidate != name:
            logger.debug("Record name '%s' taken by another shape, using '%s'", name, candidate)
        collection.register(candidate, fingerprint)
        return candidate, True

    def _unify(self, values: List[Any], object_name: Optional[str], array_object_name: Optional[str],
               path: str, parent_name: str, pending: PendingRecords, collection: SchemaCollection) -> TypeDescriptor:
        """Finds one type for a set of sampled values.

        Objects are folded into one record named object_name, or typed inline
        when there is no name. Arrays are unified over all of their items.
        """
        present = [v for v in values if v is not None]
        if not present:
            return Scalar(ScalarKind.OPTIONAL_STRING)
        kinds = {json_kind(v) for v in present}
        if kinds == {JsonKind.OBJECT}:
            if object_name is None:
                descriptor: TypeDescriptor = InlineObject()
            else:
                descriptor = self._nested_record(fold_objects(present), object_name, parent_name, pending, collection)
        elif kinds == {JsonKind.ARRAY}:
            items = [item for v in present for item in v]
            if items:
                descriptor = ArrayOf(self._unify(items, array_object_name, None, path + '[]', parent_name, pending, collection))
            else:
                descriptor = ANY_ARRAY
        elif JsonKind.OBJECT in kinds or JsonKind.ARRAY in kinds:
            descriptor = self._heterogeneous(kinds, path, collection)
        else:
            found: List[Scalar] = []
            for v in present:
                scalar = self.classify_scalar(v)
                if scalar not in found:
                    found.append(scalar)
            if len(found) == 1:
                descriptor = found[0]
            elif set(found) == {Scalar(ScalarKind.INT), Scalar(ScalarKind.DOUBLE)}:
                descriptor = Scalar(ScalarKind.DOUBLE)
            else:
                descriptor = self._heterogeneous(kinds, path, collection)
        if len(present) < len(values):
            descriptor = make_optional(descriptor)
        return descriptor

    def _heterogeneous(self, kinds: Set[JsonKind], path: str, collection: SchemaCollection) -> Scalar:
        kind_names = ', '.join(sorted(kind.value for kind in kinds))
        collection.warn(f"{path}: mixed value kinds ({kind_names}), typed as Any")
        return Scalar(ScalarKind.ANY)

    def _fingerprint(self, obj: Mapping[str, Any]) -> bytes:
        return get_tree_hash(self._shape(obj)).hash_value

    def _shape(self, value: Any) -> Any:
        """Reduces a value to a skeleton of keys and leaf kinds."""
        if isinstance(value, SampledValue):
            shapes: List[Any] = []
            for v in value.values:
                shape = self._shape(v)
                if shape not in shapes:
                    shapes.append(shape)
            return ['sampled', value.missing, shapes]
        if isinstance(value, Mapping):
            return {key: self._shape(v) for key, v in value.items()}
        if isinstance(value, list):
            if not value:
                return []
            if not self.sample_arrays:
                return [self._shape(value[0])]
            shapes = []
            for v in value:
                shape = self._shape(v)
                if shape not in shapes:
                    shapes.append(shape)
            return shapes
        return self.classify_scalar(value).kind.value


def infer_swift_records(value: Dict[str, Any], root_name: str = 'JSONModel',
                        dedupe: str = 'name', sample_arrays: bool = False) -> SchemaCollection:
    """Infers the record schemas of a decoded JSON object.

    Args:
        value: Decoded JSON object
        root_name: Name for the root record
        dedupe: Record deduplication mode, 'name' or 'structure'
        sample_arrays: Type arrays from all elements

    Returns:
        The schema collection, children before parents
    """
    inferrer = SwiftSchemaInferrer(dedupe=dedupe, sample_arrays=sample_arrays)
    return inferrer.infer_records(value, root_name)
