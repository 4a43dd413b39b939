"""
Go declaration scanner

Tree-sitter-based Go source parser and declaration-to-model extractor.
Extracts structs, their fields, and const/var initializers into a
syntax-independent scanned model.
"""

from scanner.models import (
    ImportDetails,
    InternalType,
    ScannedStruct,
    ScannedStructField,
    ScannedType,
    ScanResult,
)
from scanner.diagnostics import Omission, ScanDiagnostics
from scanner.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from scanner.nodes import SourceUnit, build_source_unit
from scanner.lookup import DeclarationIndex, ScanContext
from scanner.structs import classify_field, extract_struct
from scanner.values import extract_values
from scanner.traversal import (
    route_declaration,
    extract_declarations_from_tree,
    extract_declarations_from_units,
)
from scanner.extractor import (
    extract_file,
    scan_file,
    extract_directory,
    extract_to_dict_list,
    discover_go_files,
    ExtractionStats,
    FileScan,
)

__all__ = [
    # Data models
    "ImportDetails",
    "InternalType",
    "ScannedStruct",
    "ScannedStructField",
    "ScannedType",
    "ScanResult",
    "ExtractionStats",
    "FileScan",
    # Diagnostics
    "Omission",
    "ScanDiagnostics",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    "SourceUnit",
    "build_source_unit",
    # Mid-level extraction
    "DeclarationIndex",
    "ScanContext",
    "classify_field",
    "extract_struct",
    "extract_values",
    "route_declaration",
    "extract_declarations_from_tree",
    "extract_declarations_from_units",
    # High-level orchestration
    "extract_file",
    "scan_file",
    "extract_directory",
    "extract_to_dict_list",
    "discover_go_files",
]
