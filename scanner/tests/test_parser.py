"""
Unit tests for parser.py

Tests tree-sitter parser initialization, byte parsing, and file parsing.
"""

import unittest
import os
import tempfile
from pathlib import Path
from scanner.parser import create_parser, parse_bytes, parse_file, count_error_nodes


class TestParserInitialization(unittest.TestCase):
    """Test parser creation and initialization."""

    def test_create_parser(self):
        """Test that create_parser returns a configured Parser instance."""
        parser = create_parser()
        self.assertIsNotNone(parser)
        self.assertIsNotNone(parser.language)


class TestParseBytes(unittest.TestCase):
    """Test parsing raw bytes of Go code."""

    def test_parse_package_clause(self):
        tree = parse_bytes(b"package main\n")
        self.assertEqual(tree.root_node.type, "source_file")
        self.assertFalse(tree.root_node.has_error)

    def test_parse_struct(self):
        source = b"""
package main

type Point struct {
    X int
    Y int
}
"""
        tree = parse_bytes(source)
        self.assertEqual(tree.root_node.type, "source_file")
        self.assertFalse(tree.root_node.has_error)
        types = [child.type for child in tree.root_node.named_children]
        self.assertIn("type_declaration", types)

    def test_parse_empty(self):
        tree = parse_bytes(b"")
        self.assertEqual(tree.root_node.type, "source_file")
        self.assertEqual(len(tree.root_node.children), 0)

    def test_parse_invalid_type(self):
        """Test that non-bytes input raises TypeError."""
        with self.assertRaises(TypeError):
            parse_bytes("package main")

    def test_count_error_nodes(self):
        self.assertEqual(count_error_nodes(parse_bytes(b"package main\n")), 0)
        broken = parse_bytes(b"package main\n\ntype X struct {\n  A int\n")
        self.assertGreater(count_error_nodes(broken), 0)


class TestParseFile(unittest.TestCase):
    """Test parsing Go files from disk."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def test_parse_fixture(self):
        tree, source = parse_file(str(self.fixtures_dir / "models.go"))
        self.assertIsInstance(source, bytes)
        self.assertEqual(tree.root_node.type, "source_file")
        self.assertFalse(tree.root_node.has_error)

    def test_parse_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            parse_file("/definitely/missing/file.go")

    def test_parse_temp_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "tmp.go")
            with open(path, "wb") as f:
                f.write(b"package tmp\n\nconst A = 1\n")
            tree, source = parse_file(path)
            self.assertIn(b"const A", source)
            self.assertFalse(tree.root_node.has_error)


if __name__ == "__main__":
    unittest.main()
