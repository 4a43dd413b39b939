"""
Unit tests for traversal.py

Tests routing of declarations and tree-level extraction.
"""

import unittest

from scanner.diagnostics import ScanDiagnostics
from scanner.lookup import ScanContext
from scanner.models import InternalType
from scanner.nodes import NamedType, TypeSpec, build_source_unit
from scanner.parser import parse_bytes
from scanner.traversal import (
    extract_declarations_from_tree,
    extract_declarations_from_units,
    route_declaration,
)


def _extract(source: bytes, diagnostics=None):
    return extract_declarations_from_tree(parse_bytes(source), source, "test.go", diagnostics)


class TestRouteDeclaration(unittest.TestCase):

    def test_non_struct_type_yields_empty_result(self):
        result = route_declaration(TypeSpec("Counter", NamedType("int")), ScanContext())
        self.assertTrue(result.is_empty())
        self.assertEqual(len(result), 0)


class TestExtractFromTree(unittest.TestCase):

    def test_point_struct(self):
        result = _extract(b"package geo\n\ntype Point struct {\n    X int\n    Y int\n}\n")
        self.assertEqual(len(result.structs), 1)
        self.assertEqual(result.types, [])
        point = result.structs[0]
        self.assertEqual(point.name, "Point")
        self.assertEqual(
            [(f.name, f.kind, f.is_pointer, f.tag) for f in point.fields],
            [("X", "int", False, ""), ("Y", "int", False, "")],
        )

    def test_const_group(self):
        result = _extract(b"package a\n\nconst (\n    A = 1\n    B = 2\n)\n")
        self.assertEqual(
            [(t.name, t.kind, t.value, t.internal_type) for t in result.types],
            [("A", "int", "1", InternalType.CONST), ("B", "int", "2", InternalType.CONST)],
        )

    def test_pointer_var(self):
        result = _extract(b"package a\n\nvar P *int\n")
        self.assertEqual(len(result.types), 1)
        self.assertEqual(result.types[0].name, "P")
        self.assertEqual(result.types[0].kind, "int")
        self.assertTrue(result.types[0].is_pointer)

    def test_map_var(self):
        result = _extract(b"package a\n\nvar M map[string]int\n")
        self.assertEqual(result.types[0].kind, "int")
        self.assertFalse(result.types[0].is_pointer)

    def test_functions_and_methods_ignored(self):
        result = _extract(b"package a\n\nfunc F() {}\n\ntype T int\n\nfunc (T) M() {}\n")
        self.assertTrue(result.is_empty())

    def test_mixed_declarations_keep_source_order(self):
        result = _extract(b"""
package a

type First struct{ A int }

const One = 1

type Second struct{ B string }

var Two = "two"
""")
        self.assertEqual([s.name for s in result.structs], ["First", "Second"])
        self.assertEqual([t.name for t in result.types], ["One", "Two"])

    def test_diagnostics_collect_omissions(self):
        diagnostics = ScanDiagnostics(source="test.go")
        result = _extract(
            b"package a\n\ntype S struct {\n    F func()\n    N int\n}\n\nvar X = f()\n",
            diagnostics,
        )
        self.assertEqual([f.name for f in result.structs[0].fields], ["N"])
        self.assertEqual(result.types, [])
        self.assertEqual(
            sorted((o.unit, o.name) for o in diagnostics.omissions),
            [("field", "F"), ("initializer", "X")],
        )

    def test_to_dict_is_plain_data(self):
        result = _extract(b"package a\n\ntype P struct {\n    X int\n}\n\nconst C = 1\n")
        payload = result.to_dict()
        self.assertEqual(payload["structs"][0]["internal_type"], "struct")
        self.assertEqual(payload["types"][0]["internal_type"], "const")
        self.assertEqual(payload["structs"][0]["fields"][0]["name"], "X")


class TestExtractFromUnits(unittest.TestCase):

    def test_identifiers_resolve_across_units(self):
        first_source = b"package a\n\ntype Amount int64\n\nconst Base = 5\n"
        second_source = b"package a\n\ntype Cart struct {\n    Items []Amount\n}\n\nconst Copy = Base\n"
        units = [
            build_source_unit(parse_bytes(first_source), first_source, "first.go"),
            build_source_unit(parse_bytes(second_source), second_source, "second.go"),
        ]
        first, second = extract_declarations_from_units(units)
        self.assertEqual([t.name for t in first.types], ["Base"])
        self.assertEqual(second.structs[0].fields[0].kind, "int64")
        self.assertEqual((second.types[0].name, second.types[0].value), ("Copy", "5"))


if __name__ == "__main__":
    unittest.main()
