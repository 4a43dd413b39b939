"""
Unit tests for values.py

Tests classification of const/var initializers into ScannedType entries.
"""

import unittest
from pathlib import Path

from scanner.diagnostics import ScanDiagnostics
from scanner.lookup import DeclarationIndex, ScanContext
from scanner.models import InternalType
from scanner.nodes import (
    ArrayType,
    BasicLit,
    CompositeLit,
    Ident,
    LiteralElement,
    MapType,
    NamedType,
    PointerType,
    StructType,
    TypeSpec,
    UnsupportedExpr,
    ValueSpec,
    build_source_unit,
)
from scanner.parser import parse_bytes, parse_file
from scanner.traversal import extract_declarations_from_tree
from scanner.values import extract_initializer, extract_typed_variables, extract_values


def _context(*declarations, diagnostics=None):
    index = DeclarationIndex()
    for declaration in declarations:
        index.add(declaration)
    return ScanContext(index=index, diagnostics=diagnostics)


class TestLiterals(unittest.TestCase):

    def test_basic_literal(self):
        spec = ValueSpec("const", ("A",), values=(BasicLit("int", "1"),), doc="A doc.")
        entries = extract_values(spec, _context())
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].name, "A")
        self.assertEqual(entries[0].kind, "int")
        self.assertEqual(entries[0].value, "1")
        self.assertEqual(entries[0].doc, "A doc.")
        self.assertEqual(entries[0].internal_type, InternalType.CONST)

    def test_var_literal_is_tagged_var(self):
        spec = ValueSpec("var", ("S",), values=(BasicLit("string", '"x"'),))
        self.assertEqual(extract_values(spec, _context())[0].internal_type, InternalType.VAR)

    def test_multiple_initializers_keep_order(self):
        spec = ValueSpec("var", ("a", "b"), values=(BasicLit("int", "1"), BasicLit("int", "2")))
        entries = extract_values(spec, _context())
        self.assertEqual([(e.name, e.value) for e in entries], [("a", "1"), ("b", "2")])

    def test_bool_identifier(self):
        entry = extract_initializer(
            "On", Ident("true"), ValueSpec("const", ("On",), values=(Ident("true"),)), _context()
        )
        self.assertEqual((entry.kind, entry.value), ("bool", "true"))


class TestIdentifiers(unittest.TestCase):

    def test_resolved_identifier(self):
        base = ValueSpec("const", ("Base",), values=(BasicLit("int", "10"),))
        alias = ValueSpec("const", ("Alias",), values=(Ident("Base"),))
        entries = extract_values(alias, _context(base, alias))
        self.assertEqual(len(entries), 1)
        self.assertEqual((entries[0].name, entries[0].kind, entries[0].value), ("Alias", "int", "10"))

    def test_transitive_identifier(self):
        first = ValueSpec("const", ("First",), values=(BasicLit("string", '"x"'),))
        second = ValueSpec("const", ("Second",), values=(Ident("First"),))
        third = ValueSpec("const", ("Third",), values=(Ident("Second"),))
        entries = extract_values(third, _context(first, second, third))
        self.assertEqual(entries[0].value, '"x"')

    def test_unresolved_identifier_is_dropped_without_disturbing_order(self):
        diagnostics = ScanDiagnostics()
        spec = ValueSpec(
            "var",
            ("a", "b", "c"),
            values=(BasicLit("int", "1"), Ident("nowhere"), BasicLit("int", "3")),
        )
        entries = extract_values(spec, _context(spec, diagnostics=diagnostics))
        self.assertEqual([(e.name, e.value) for e in entries], [("a", "1"), ("c", "3")])
        self.assertEqual(len(diagnostics), 1)
        self.assertIn("nowhere", diagnostics.omissions[0].reason)

    def test_cyclic_identifiers_are_dropped(self):
        first = ValueSpec("const", ("X",), values=(Ident("Y"),))
        second = ValueSpec("const", ("Y",), values=(Ident("X"),))
        self.assertEqual(extract_values(first, _context(first, second)), [])


class TestComposites(unittest.TestCase):

    def test_map_literal(self):
        literal = CompositeLit(
            MapType(NamedType("string"), NamedType("int")),
            (
                LiteralElement("1", key='"one"'),
                LiteralElement("2", key='"two"'),
                LiteralElement("3", key='"three"'),
            ),
        )
        spec = ValueSpec("var", ("Numbers",), values=(literal,))
        entry = extract_values(spec, _context())[0]
        self.assertEqual(entry.kind, "int")
        self.assertEqual(entry.internal_type, InternalType.MAP)
        self.assertEqual(list(entry.value.items()), [('"one"', "1"), ('"two"', "2"), ('"three"', "3")])

    def test_map_literal_duplicate_key_keeps_first(self):
        diagnostics = ScanDiagnostics()
        literal = CompositeLit(
            MapType(NamedType("string"), NamedType("int")),
            (LiteralElement("1", key='"a"'), LiteralElement("2", key='"a"')),
        )
        spec = ValueSpec("var", ("M",), values=(literal,))
        entry = extract_values(spec, _context(diagnostics=diagnostics))[0]
        self.assertEqual(entry.value, {'"a"': "1"})
        self.assertEqual(len(diagnostics), 1)

    def test_slice_literal(self):
        literal = CompositeLit(
            ArrayType(NamedType("string")),
            (LiteralElement('"a"'), LiteralElement('"b"')),
        )
        entry = extract_values(ValueSpec("var", ("L",), values=(literal,)), _context())[0]
        self.assertEqual(entry.kind, "string")
        self.assertEqual(entry.value, ['"a"', '"b"'])
        self.assertEqual(entry.internal_type, InternalType.SLICE)

    def test_indexed_slice_literal_is_dropped(self):
        diagnostics = ScanDiagnostics()
        literal = CompositeLit(
            ArrayType(NamedType("int")),
            (LiteralElement("1", key="0"), LiteralElement("2", key="4")),
        )
        spec = ValueSpec("var", ("Sparse",), values=(literal,))
        self.assertEqual(extract_values(spec, _context(diagnostics=diagnostics)), [])
        self.assertEqual(len(diagnostics), 1)
        self.assertEqual(diagnostics.omissions[0].name, "Sparse")
        self.assertIn("indexed", diagnostics.omissions[0].reason)

    def test_indexed_slice_literal_from_source(self):
        source = b"package a\n\nvar Sparse = []int{0: 1, 4: 2}\n\nvar Dense = []int{1, 2}\n"
        result = extract_declarations_from_tree(parse_bytes(source), source, "sparse.go")
        self.assertEqual([(t.name, t.value) for t in result.types], [("Dense", ["1", "2"])])

    def test_slice_literal_resolves_named_element(self):
        celsius = TypeSpec("Celsius", NamedType("float64"))
        literal = CompositeLit(ArrayType(NamedType("Celsius")), (LiteralElement("1.5"),))
        entry = extract_values(ValueSpec("var", ("T",), values=(literal,)), _context(celsius))[0]
        self.assertEqual(entry.kind, "float64")

    def test_named_slice_type_literal(self):
        amounts = TypeSpec("Amounts", ArrayType(NamedType("int64")))
        literal = CompositeLit(NamedType("Amounts"), (LiteralElement("1"), LiteralElement("2")))
        entry = extract_values(ValueSpec("var", ("A",), values=(literal,)), _context(amounts))[0]
        self.assertEqual((entry.kind, entry.value), ("int64", ["1", "2"]))

    def test_struct_literal_is_dropped(self):
        point = TypeSpec("Point", StructType())
        literal = CompositeLit(NamedType("Point"), (LiteralElement("1"),))
        self.assertEqual(extract_values(ValueSpec("var", ("P",), values=(literal,)), _context(point)), [])

    def test_unsupported_expression_is_dropped(self):
        spec = ValueSpec("var", ("F",), values=(UnsupportedExpr("call_expression", "f()"),))
        self.assertEqual(extract_values(spec, _context()), [])


class TestTypedVariables(unittest.TestCase):

    def test_pointer_var(self):
        entries = extract_typed_variables(ValueSpec("var", ("P",), type=PointerType(NamedType("int"))), _context())
        self.assertEqual(len(entries), 1)
        self.assertTrue(entries[0].is_pointer)
        self.assertEqual(entries[0].kind, "int")
        self.assertIsNone(entries[0].value)

    def test_map_var(self):
        spec = ValueSpec("var", ("M",), type=MapType(NamedType("string"), NamedType("int")))
        entries = extract_typed_variables(spec, _context())
        self.assertEqual(entries[0].kind, "int")
        self.assertFalse(entries[0].is_pointer)
        self.assertEqual(entries[0].internal_type, InternalType.MAP)

    def test_pointer_to_map_var_is_dropped(self):
        spec = ValueSpec("var", ("M",), type=PointerType(MapType(NamedType("string"), NamedType("int"))))
        self.assertEqual(extract_typed_variables(spec, _context()), [])

    def test_const_without_value_is_ignored(self):
        self.assertEqual(extract_typed_variables(ValueSpec("const", ("B",)), _context()), [])


class TestValuesFixture(unittest.TestCase):
    """Value extraction over the values.go fixture."""

    @classmethod
    def setUpClass(cls):
        path = Path(__file__).parent / "fixtures" / "values.go"
        tree, source = parse_file(str(path))
        cls.unit = build_source_unit(tree, source, path="values.go")
        cls.context = ScanContext(index=DeclarationIndex.from_units([cls.unit]))
        cls.entries = []
        for spec in cls.unit.declarations:
            if spec.values:
                cls.entries.extend(extract_values(spec, cls.context))
            else:
                cls.entries.extend(extract_typed_variables(spec, cls.context))
        cls.by_name = {entry.name: entry for entry in cls.entries}

    def test_entry_order(self):
        self.assertEqual(
            [entry.name for entry in self.entries],
            ["MaxItems", "Greeting", "Ratio", "Initial", "Enabled", "Alias",
             "Codes", "Names", "A", "B", "P", "M"],
        )

    def test_literal_kinds(self):
        kinds = {name: self.by_name[name].kind for name in ("MaxItems", "Greeting", "Ratio", "Initial", "Enabled")}
        self.assertEqual(
            kinds,
            {"MaxItems": "int", "Greeting": "string", "Ratio": "float", "Initial": "char", "Enabled": "bool"},
        )
        self.assertEqual(self.by_name["Greeting"].value, '"hello"')

    def test_group_doc(self):
        self.assertEqual(self.by_name["MaxItems"].doc, "MaxItems caps a page.")
        self.assertIsNone(self.by_name["Greeting"].doc)
        self.assertEqual(self.by_name["Alias"].doc, "Alias refers to another constant.")

    def test_alias_resolved(self):
        alias = self.by_name["Alias"]
        self.assertEqual((alias.kind, alias.value), ("int", "100"))

    def test_map_and_slice(self):
        codes = self.by_name["Codes"]
        self.assertEqual(list(codes.value), ['"ok"', '"created"', '"gone"'])
        self.assertEqual(codes.value['"gone"'], "410")
        self.assertEqual(self.by_name["Names"].value, ['"alpha"', '"beta"', '"gamma"'])

    def test_typed_vars(self):
        self.assertTrue(self.by_name["P"].is_pointer)
        self.assertEqual(self.by_name["P"].kind, "int")
        self.assertEqual(self.by_name["M"].kind, "int")


if __name__ == "__main__":
    unittest.main()
