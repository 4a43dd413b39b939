"""
Declaration routing and tree-level extraction.

This module dispatches each top-level Go declaration to the struct or value
extractor and provides the entry points that turn a parsed tree (or a set of
files sharing one package) into a ScanResult.
"""

import logging
from typing import Iterable, List, Optional

from tree_sitter import Tree

from scanner.diagnostics import ScanDiagnostics
from scanner.lookup import DeclarationIndex, ScanContext
from scanner.models import ScanResult
from scanner.nodes import Declaration, SourceUnit, TypeSpec, ValueSpec, build_source_unit
from scanner.structs import extract_struct
from scanner.values import extract_typed_variables, extract_values

logger = logging.getLogger(__name__)


def route_declaration(declaration: Declaration, context: ScanContext) -> ScanResult:
    """Route one declaration to the matching extractor.

    Struct-shaped type declarations yield one ScannedStruct; const/var specs
    yield one ScannedType per supported initializer (or per name for typed
    vars without initializer). Anything else yields an empty result, which
    is a normal outcome rather than an error.
    """
    result = ScanResult()

    if isinstance(declaration, TypeSpec):
        struct = extract_struct(declaration, context)
        if struct is not None:
            result.structs.append(struct)
        else:
            logger.debug("Type %s is not a struct; nothing to extract", declaration.name)

    elif isinstance(declaration, ValueSpec):
        if declaration.values:
            result.types.extend(extract_values(declaration, context))
        else:
            result.types.extend(extract_typed_variables(declaration, context))

    return result


def extract_unit(unit: SourceUnit, context: ScanContext) -> ScanResult:
    """Extract every declaration of one source unit, in source order."""
    unit_context = context.for_unit(unit)
    result = ScanResult()
    for declaration in unit.declarations:
        result.extend(route_declaration(declaration, unit_context))
    return result


def extract_declarations_from_units(
    units: Iterable[SourceUnit],
    diagnostics: Optional[ScanDiagnostics] = None,
) -> List[ScanResult]:
    """Extract several units that resolve identifiers against each other.

    One declaration index is built over all units (typically the files of
    one Go package) before any of them is extracted.

    Returns:
        One ScanResult per unit, in input order.
    """
    units = list(units)
    context = ScanContext(
        index=DeclarationIndex.from_units(units),
        diagnostics=diagnostics,
    )
    return [extract_unit(unit, context) for unit in units]


def extract_declarations_from_tree(
    tree: Tree,
    source_bytes: bytes,
    file_path: str = "",
    diagnostics: Optional[ScanDiagnostics] = None,
) -> ScanResult:
    """Extract all structs and value entries from a parsed Go file.

    This is the main entry point for single-file extraction.

    Args:
        tree: The parsed tree-sitter tree.
        source_bytes: The raw source bytes.
        file_path: Path recorded for logging.
        diagnostics: Optional sink recording every skipped unit.

    Returns:
        ScanResult with structs and types in declaration order.
    """
    logger.info(f"Extracting declarations from {file_path or '<memory>'}")
    unit = build_source_unit(tree, source_bytes, path=file_path)
    result = extract_declarations_from_units([unit], diagnostics=diagnostics)[0]
    logger.info(
        f"Extracted {len(result.structs)} structs and {len(result.types)} "
        f"values from {file_path or '<memory>'}"
    )
    return result
