"""
Configuration constants for Go declaration extraction.

Defines the tree-sitter node type strings used to build the typed
declaration views, plus file discovery settings.
"""

from typing import Dict, Set

# Top-level declaration node types
TYPE_DECLARATION: str = "type_declaration"
CONST_DECLARATION: str = "const_declaration"
VAR_DECLARATION: str = "var_declaration"
IMPORT_DECLARATION: str = "import_declaration"
PACKAGE_CLAUSE: str = "package_clause"

# Spec node types found inside declarations (directly or inside a group)
TYPE_SPEC_NODES: Set[str] = {"type_spec", "type_alias"}
CONST_SPEC: str = "const_spec"
VAR_SPEC: str = "var_spec"
IMPORT_SPEC: str = "import_spec"

# Grouping wrappers: `var ( ... )`, `import ( ... )`
SPEC_LIST_NODES: Set[str] = {"var_spec_list", "import_spec_list", "type_spec_list"}

# Comment node type (//, /* */)
COMMENT_NODE: str = "comment"

# Type expression node types
NAMED_TYPE_NODES: Set[str] = {"type_identifier", "identifier"}
QUALIFIED_TYPE: str = "qualified_type"
POINTER_TYPE: str = "pointer_type"
ARRAY_TYPE_NODES: Set[str] = {"array_type", "slice_type", "implicit_length_array_type"}
MAP_TYPE: str = "map_type"
STRUCT_TYPE: str = "struct_type"
PARENTHESIZED_TYPE: str = "parenthesized_type"
FIELD_DECLARATION_LIST: str = "field_declaration_list"
FIELD_DECLARATION: str = "field_declaration"

# Initializer expression node types
COMPOSITE_LITERAL: str = "composite_literal"
LITERAL_ELEMENT: str = "literal_element"
KEYED_ELEMENT: str = "keyed_element"
IDENTIFIER: str = "identifier"

# Literal node type -> Kind string (lower-cased Go token names)
LITERAL_KIND_MAP: Dict[str, str] = {
    "int_literal": "int",
    "float_literal": "float",
    "imaginary_literal": "imag",
    "rune_literal": "char",
    "interpreted_string_literal": "string",
    "raw_string_literal": "string",
    "true": "bool",
    "false": "bool",
}

# Predeclared Go types never looked up in the declaration index
PREDECLARED_TYPES: Set[str] = {
    "bool", "byte", "rune", "string", "error", "any",
    "int", "int8", "int16", "int32", "int64",
    "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
    "float32", "float64", "complex64", "complex128",
}

# Kind reported for anonymous struct types
STRUCT_KIND: str = "struct"

# Go file extensions
GO_EXTENSIONS: Set[str] = {".go"}

# Directories skipped during discovery
EXCLUDED_DIRS: Set[str] = {"vendor", "testdata", "node_modules", "result"}

# Extraction policy defaults
DEFAULT_INCLUDE_TEST_FILES: bool = False
DEFAULT_PER_PACKAGE_INDEX: bool = True
