import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from swiftize.common import (
    capitalize_first,
    element_type_name,
    get_tree_hash,
    process_template,
    swift_name,
    swift_string_literal,
)


class TestSwiftName(unittest.TestCase):

    def test_separators_become_underscores(self):
        self.assertEqual(swift_name("first name"), "first_name")
        self.assertEqual(swift_name("last-name"), "last_name")
        self.assertEqual(swift_name("geo.lat"), "geo_lat")
        self.assertEqual(swift_name("a b-c.d"), "a_b_c_d")

    def test_keys_differing_only_by_separator_collapse(self):
        self.assertEqual(swift_name("a b"), swift_name("a-b"))
        self.assertEqual(swift_name("a-b"), swift_name("a.b"))
        self.assertEqual(swift_name("a.b"), "a_b")

    def test_leading_digit_gets_underscore(self):
        self.assertEqual(swift_name("2fa"), "_2fa")
        self.assertEqual(swift_name("1st place"), "_1st_place")

    def test_idempotent(self):
        for key in ["2fa", "first name", "x-y.z", "plain", "_private", "9"]:
            once = swift_name(key)
            self.assertEqual(swift_name(once), once)

    def test_other_names_pass_through(self):
        self.assertEqual(swift_name(""), "")
        self.assertEqual(swift_name("class"), "class")
        self.assertEqual(swift_name("größe"), "größe")
        self.assertEqual(swift_name("a/b"), "a/b")


class TestTypeNames(unittest.TestCase):

    def test_capitalize_first_only_touches_first_letter(self):
        self.assertEqual(capitalize_first("address"), "Address")
        self.assertEqual(capitalize_first("user_name"), "User_name")
        self.assertEqual(capitalize_first("userName"), "UserName")
        self.assertEqual(capitalize_first("_2fa"), "_2fa")
        self.assertEqual(capitalize_first(""), "")

    def test_element_type_name(self):
        self.assertEqual(element_type_name("users"), "UserElement")
        self.assertEqual(element_type_name("items"), "ItemElement")
        self.assertEqual(element_type_name("data"), "DataElement")

    def test_element_type_name_strips_one_s(self):
        self.assertEqual(element_type_name("glasses"), "GlasseElement")
        self.assertEqual(element_type_name("bus"), "BuElement")
        self.assertEqual(element_type_name("s"), "SElement")


class TestHelpers(unittest.TestCase):

    def test_swift_string_literal(self):
        self.assertEqual(swift_string_literal('say "hi"'), 'say \\"hi\\"')
        self.assertEqual(swift_string_literal('a\\b'), 'a\\\\b')
        self.assertEqual(swift_string_literal('line\nbreak'), 'line\\nbreak')

    def test_tree_hash_ignores_key_order(self):
        first = get_tree_hash({"a": "string", "b": ["int"]})
        second = get_tree_hash({"b": ["int"], "a": "string"})
        self.assertEqual(first.hash_value, second.hash_value)
        self.assertEqual(first.count, second.count)

    def test_tree_hash_differs_for_different_shapes(self):
        self.assertNotEqual(get_tree_hash({"a": "string"}).hash_value,
                            get_tree_hash({"a": "int"}).hash_value)

    def test_process_template(self):
        rendered = process_template('jsontoswift/swift_struct.jinja',
                                    struct_name='Empty', fields=[], coding_keys=False)
        self.assertEqual(rendered, "struct Empty: Codable {\n}")


if __name__ == '__main__':
    unittest.main()
