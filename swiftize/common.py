"""
Common utility functions for Swiftize.
"""

# pylint: disable=line-too-long

import os
import re
import hashlib
import json
from typing import Any
import jinja2


def swift_name(name):
    """Convert a JSON object key into a Swift identifier.

    Spaces, hyphens and periods become underscores and a leading numeric
    character gets an underscore prefix. Reserved words, unicode and empty
    names pass through unchanged.
    """
    val = re.sub(r'[ \-.]', '_', name)
    if val[:1].isnumeric():
        val = '_' + val
    return val


def capitalize_first(name):
    """Upper-case the first character of a name and leave the rest alone."""
    return name[:1].upper() + name[1:]


def element_type_name(field_name):
    """
    Derive the record name for the object elements of an array field.

    The field name is capitalized, a single trailing 's' is removed and
    'Element' is appended, so 'users' becomes 'UserElement'.

    Args:
        field_name (str): The sanitized field name.

    Returns:
        str: The element record name.
    """
    name = capitalize_first(field_name)
    if name.endswith('s'):
        name = name[:-1]
    return name + 'Element'


def swift_string_literal(text):
    """Escape a string for use inside a Swift string literal."""
    return text.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n').replace('\r', '\\r').replace('\t', '\\t')


class NodeHash:
    """ A hash value and count for a JSON object. """
    def __init__(self: 'NodeHash', hash_value: bytes, count: int):
        self.hash_value: bytes = hash_value
        self.count: int = count


def get_tree_hash(json_obj: Any) -> NodeHash:
    """
    Generate a hash from a JSON value.

    Args:
        json_obj (Any): The JSON value to hash. Object keys are sorted first,
            so key order does not change the hash.

    Returns:
        NodeHash: The hash value and count.
    """
    if isinstance(json_obj, dict) or isinstance(json_obj, list):
        s = json.dumps(json_obj, sort_keys=True).encode('utf-8')
    else:
        s = json.dumps(json_obj).encode('utf-8')
    return NodeHash(hashlib.sha256(s).digest(), len(s))


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the template, relative to the package.
        **kvargs: The values to use as input for the template.

    Returns:
        str: The processed template as a string.
    """
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader)
    template_env.filters['swift_string'] = swift_string_literal

    template = template_env.get_template(file_path)
    return template.render(**kvargs)
