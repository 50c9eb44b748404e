# pylint: disable=line-too-long

""" JsonToSwift class for generating Swift Codable structs from a JSON document """

import logging
import os
from typing import Dict, Optional

from swiftize.common import process_template
from swiftize.json_value import JsonInputError, JsonNode, decode_json_text, pretty_print_json
from swiftize.schema_inference import (
    ArrayOf,
    InlineObject,
    NamedRecord,
    OptionalOf,
    RecordSchema,
    Scalar,
    ScalarKind,
    SchemaCollection,
    SwiftSchemaInferrer,
    TypeDescriptor,
)

logger = logging.getLogger(__name__)

SCALAR_TO_SWIFT: Dict[ScalarKind, str] = {
    ScalarKind.STRING: 'String',
    ScalarKind.BOOL: 'Bool',
    ScalarKind.INT: 'Int',
    ScalarKind.DOUBLE: 'Double',
    ScalarKind.OPTIONAL_STRING: 'String?',
    ScalarKind.ANY: 'Any',
}


class JsonToSwift:
    """ Generates Swift structs for the records inferred from a JSON document """

    def __init__(self, root_name: str = 'JSONModel', array_root_name: str = 'ArrayElement',
                 dedupe: str = 'name', sample_arrays: bool = False, coding_keys: bool = False,
                 indent: int = 2) -> None:
        self.root_name = root_name
        self.array_root_name = array_root_name
        self.coding_keys = coding_keys
        self.indent = indent
        self.inferrer = SwiftSchemaInferrer(dedupe=dedupe, sample_arrays=sample_arrays)

    def swift_type(self, descriptor: TypeDescriptor) -> str:
        """Returns the Swift spelling of a type descriptor"""
        if isinstance(descriptor, Scalar):
            return SCALAR_TO_SWIFT[descriptor.kind]
        if isinstance(descriptor, ArrayOf):
            return f"[{self.swift_type(descriptor.items)}]"
        if isinstance(descriptor, InlineObject):
            return '[String: Any]'
        if isinstance(descriptor, NamedRecord):
            return descriptor.name
        if isinstance(descriptor, OptionalOf):
            return f"{self.swift_type(descriptor.inner)}?"
        return 'Any'

    def generate_struct(self, record: RecordSchema) -> str:
        """Generates a Swift struct declaration for a record"""
        fields = [{
            'name': field.name,
            'type': self.swift_type(field.type),
            'json_name': field.json_name,
        } for field in record.fields]
        return process_template('jsontoswift/swift_struct.jinja',
                                struct_name=record.name,
                                fields=fields,
                                coding_keys=self.coding_keys)

    def generate_document(self, formatted_json: str, collection: Optional[SchemaCollection],
                          element_count: Optional[int] = None) -> str:
        """Frames the formatted JSON and the struct declarations into the output text"""
        structs = [self.generate_struct(record) for record in collection] if collection else []
        return process_template('jsontoswift/swift_document.jinja',
                                formatted_json=formatted_json,
                                element_count=element_count,
                                structs=structs)

    def convert_value(self, value: JsonNode, formatted_json: str) -> str:
        """Generates the output for an already decoded value"""
        if isinstance(value, dict):
            return self.generate_document(formatted_json, self.inferrer.infer_records(value, self.root_name))
        if isinstance(value, list):
            collection = self.inferrer.infer_array_records(value, self.array_root_name)
            if collection is not None:
                return self.generate_document(formatted_json, collection,
                                              element_count=len(value))
        return self.generate_document(formatted_json, None)

    def convert(self, text: str) -> str:
        """Converts JSON text to Swift declarations.

        Never raises for bad input: decode failures come back as a single
        comment line.
        """
        try:
            value = decode_json_text(text)
            formatted_json = pretty_print_json(value, self.indent)
        except JsonInputError as e:
            logger.info("JSON input rejected: %s", e.message)
            return e.comment()
        return self.convert_value(value, formatted_json)


def convert_json_text_to_swift(text: str, root_name: str = 'JSONModel', array_root_name: str = 'ArrayElement',
                               dedupe: str = 'name', sample_arrays: bool = False, coding_keys: bool = False,
                               indent: int = 2) -> str:
    """Converts JSON text into Swift Codable struct declarations.

    Args:
        text: The JSON document
        root_name: Struct name for a top level object
        array_root_name: Struct name for the elements of a top level array
        dedupe: 'name' (first object to claim a name wins) or 'structure'
        sample_arrays: Type arrays from all of their elements
        coding_keys: Emit CodingKeys for fields whose name differs from the JSON key
        indent: Indentation of the formatted JSON comment block

    Returns:
        The generated text, or a single error comment line
    """
    converter = JsonToSwift(root_name=root_name, array_root_name=array_root_name, dedupe=dedupe,
                            sample_arrays=sample_arrays, coding_keys=coding_keys, indent=indent)
    return converter.convert(text)


def convert_json_to_swift(json_file_path: str, swift_file_path: str, root_name: str = 'JSONModel',
                          array_root_name: str = 'ArrayElement', dedupe: str = 'name',
                          sample_arrays: bool = False, coding_keys: bool = False, indent: int = 2) -> None:
    """Reads a JSON file and writes the generated Swift declarations to a file.

    Args:
        json_file_path: Input JSON file
        swift_file_path: Output Swift file; missing directories are created
        root_name: Struct name for a top level object
        array_root_name: Struct name for the elements of a top level array
        dedupe: Record deduplication mode, 'name' or 'structure'
        sample_arrays: Type arrays from all of their elements
        coding_keys: Emit CodingKeys for renamed fields
        indent: Indentation of the formatted JSON comment block
    """
    if not os.path.exists(json_file_path):
        raise FileNotFoundError(f"JSON file not found: {json_file_path}")

    # undecodable bytes surface as the encoding error comment
    with open(json_file_path, 'r', encoding='utf-8', errors='surrogateescape') as f:
        text = f.read()

    output = convert_json_text_to_swift(text, root_name=root_name, array_root_name=array_root_name,
                                        dedupe=dedupe, sample_arrays=sample_arrays,
                                        coding_keys=coding_keys, indent=indent)

    output_dir = os.path.dirname(swift_file_path)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    with open(swift_file_path, 'w', encoding='utf-8') as f:
        f.write(output + '\n')
