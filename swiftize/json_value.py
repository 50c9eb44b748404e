"""Decoded JSON value model.

Wraps the standard json module for the two collaborators the generator
needs: a strict decoder (text to value tree) and a canonical pretty
printer (value tree to key-sorted, indented text). Decode-side failures
are raised as JsonInputError subclasses that know their one-line comment.
"""

import json
from enum import Enum
from typing import Dict, List, Optional

JsonNode = Dict[str, 'JsonNode'] | List['JsonNode'] | str | bool | int | float | None


class JsonKind(Enum):
    """The six shapes a decoded JSON value can take."""
    NULL = 'null'
    BOOL = 'bool'
    NUMBER = 'number'
    STRING = 'string'
    ARRAY = 'array'
    OBJECT = 'object'


class JsonInputError(Exception):
    """
    Exception raised when the input text cannot be turned into a JSON value.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)

    def comment(self) -> str:
        """Single comment line that replaces the generated output."""
        return f"// Error: {self.message}"


class JsonEncodingError(JsonInputError):
    """The input text is not representable as UTF-8."""

    def __init__(self, cause: Optional[Exception] = None) -> None:
        super().__init__("Unable UTF-8 encoding", cause)


class JsonStringConversionError(JsonInputError):
    """The pretty printed document could not be turned back into UTF-8 text."""

    def __init__(self, cause: Optional[Exception] = None) -> None:
        super().__init__("Unable String conversion", cause)


class JsonSyntaxError(JsonInputError):
    """The decoder rejected the input."""

    def comment(self) -> str:
        return f"// Error JSON parsing: {self.message}"


def json_kind(value: JsonNode) -> JsonKind:
    """Returns the kind of a decoded JSON value."""
    if value is None:
        return JsonKind.NULL
    # bool is a subclass of int
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def is_integer_number(value: JsonNode) -> bool:
    """True for numbers written without a fractional part or exponent."""
    return isinstance(value, int) and not isinstance(value, bool)


def _reject_constant(name: str):
    raise ValueError(f"Invalid value '{name}'")


def decode_json_text(text: str) -> JsonNode:
    """Decodes JSON text after trimming surrounding whitespace.

    Args:
        text: Candidate JSON text

    Returns:
        The decoded value tree

    Raises:
        JsonEncodingError: The text cannot be encoded as UTF-8
        JsonSyntaxError: The text is not valid JSON
    """
    cleaned = text.strip()
    try:
        data = cleaned.encode('utf-8')
    except UnicodeEncodeError as e:
        raise JsonEncodingError(e) from e
    try:
        return json.loads(data, parse_constant=_reject_constant)
    except ValueError as e:
        raise JsonSyntaxError(str(e), e) from e
    except RecursionError as e:
        raise JsonSyntaxError("Document nesting is too deep", e) from e


def pretty_print_json(value: JsonNode, indent: int = 2) -> str:
    """Renders a value as canonical key-sorted, indented JSON text.

    Raises:
        JsonStringConversionError: The rendered text is not valid UTF-8,
            which happens when the document held unpaired surrogate escapes
    """
    text = json.dumps(value, indent=indent, sort_keys=True, ensure_ascii=False)
    try:
        text.encode('utf-8')
    except UnicodeEncodeError as e:
        raise JsonStringConversionError(e) from e
    return text
