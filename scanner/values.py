"""
Literal and value extraction for const/var declarations.

Every initializer of a spec is classified on its own; unsupported or
unresolvable initializers are dropped and the remaining entries keep their
source order.
"""

import logging
from typing import Dict, List, Optional, Set

from scanner.lookup import ScanContext
from scanner.models import InternalType, ScannedType
from scanner.nodes import (
    ArrayType,
    BasicLit,
    CompositeLit,
    Expr,
    Ident,
    MapType,
    NamedType,
    QualifiedType,
    TypeExpr,
    ValueSpec,
    type_text,
)
from scanner.structs import Unsupported, resolve_element_kind, resolve_type

logger = logging.getLogger(__name__)

_BOOL_IDENTIFIERS = {"true", "false"}


def _plain_internal_type(spec: ValueSpec) -> InternalType:
    return InternalType.CONST if spec.keyword == "const" else InternalType.VAR


def _composite_type(type_expr: TypeExpr, context: ScanContext) -> TypeExpr:
    """Unwrap a named composite type (``Lookup{...}``) to its declared map/array shape."""
    if isinstance(type_expr, NamedType):
        spec = context.index.type_spec(type_expr.name)
        if spec is not None and isinstance(spec.type, (MapType, ArrayType)):
            return spec.type
    return type_expr


def _extract_map(
    name: str,
    literal: CompositeLit,
    map_type: MapType,
    spec: ValueSpec,
    context: ScanContext,
) -> ScannedType:
    entries: Dict[str, str] = {}
    for element in literal.elements:
        if element.key is None:
            context.omit("initializer", name, "map element without key", spec.line)
            continue
        if element.key in entries:
            context.omit("initializer", name, f"duplicate map key {element.key}", spec.line)
            continue
        entries[element.key] = element.value

    value_type = map_type.value
    import_details = None
    if isinstance(value_type, QualifiedType):
        import_details = resolve_type(value_type, context).import_details
        kind = value_type.name
    else:
        kind = type_text(value_type)

    return ScannedType(
        name=name,
        kind=kind,
        value=entries,
        doc=spec.doc,
        internal_type=InternalType.MAP,
        import_details=import_details,
    )


def _extract_slice(
    name: str,
    literal: CompositeLit,
    array_type: ArrayType,
    spec: ValueSpec,
    context: ScanContext,
) -> Optional[ScannedType]:
    # Indexed entries ([]int{0: 1, 4: 2}) cannot be flattened to a list
    if any(element.key is not None for element in literal.elements):
        context.omit("initializer", name, "indexed array/slice literal", spec.line)
        return None

    resolution = resolve_element_kind(array_type.element, context)
    if isinstance(resolution, Unsupported):
        context.omit("initializer", name, resolution.reason, spec.line)
        return None

    return ScannedType(
        name=name,
        kind=resolution.kind,
        value=[element.value for element in literal.elements],
        doc=spec.doc,
        internal_type=InternalType.SLICE,
        import_details=resolution.import_details,
    )


def extract_initializer(
    name: str,
    expr: Expr,
    spec: ValueSpec,
    context: ScanContext,
    _visited: Optional[Set[str]] = None,
) -> Optional[ScannedType]:
    """Build the model entry for one initializer expression.

    Args:
        name: Identifier the entry is declared under.
        expr: The initializer to classify.
        spec: The const/var spec the initializer belongs to.
        context: Index, imports and diagnostics of the current traversal.

    Returns:
        The ScannedType, or None when the initializer is unsupported or an
        identifier reference cannot be resolved.
    """
    if isinstance(expr, BasicLit):
        return ScannedType(
            name=name,
            kind=expr.kind,
            value=expr.value,
            doc=spec.doc,
            internal_type=_plain_internal_type(spec),
        )

    if isinstance(expr, Ident):
        if expr.name in _BOOL_IDENTIFIERS:
            return extract_initializer(name, BasicLit(kind="bool", value=expr.name), spec, context)

        visited = set(_visited or ())
        if expr.name in visited:
            context.omit("initializer", name, f"cyclic reference to '{expr.name}'", spec.line)
            return None
        visited.add(expr.name)

        resolved = context.index.value_for(expr.name)
        if resolved is None:
            context.omit("initializer", name, f"unresolved identifier '{expr.name}'", spec.line)
            return None
        _, referenced = resolved
        return extract_initializer(name, referenced, spec, context, visited)

    if isinstance(expr, CompositeLit):
        literal_type = _composite_type(expr.type, context)
        if isinstance(literal_type, MapType):
            return _extract_map(name, expr, literal_type, spec, context)
        if isinstance(literal_type, ArrayType):
            return _extract_slice(name, expr, literal_type, spec, context)
        context.omit(
            "initializer", name, f"unsupported composite literal '{type_text(expr.type)}'", spec.line
        )
        return None

    context.omit("initializer", name, f"unsupported initializer '{expr.node_type}'", spec.line)
    return None


def extract_values(spec: ValueSpec, context: ScanContext) -> List[ScannedType]:
    """Extract one entry per supported initializer of a const/var spec.

    The entry at position ``i`` is named after the identifier at the same
    position; when the counts differ the first identifier is used.
    """
    result: List[ScannedType] = []
    if not spec.names:
        return result

    for position, expr in enumerate(spec.values):
        name = spec.names[position] if len(spec.names) == len(spec.values) else spec.names[0]
        parsed = extract_initializer(name, expr, spec, context)
        if parsed is not None:
            result.append(parsed)
    return result


def extract_typed_variables(spec: ValueSpec, context: ScanContext) -> List[ScannedType]:
    """Extract entries for ``var`` specs that declare a type but no initializer."""
    if spec.type is None or spec.values or spec.keyword != "var":
        return []

    resolution = resolve_type(spec.type, context)
    if isinstance(resolution, Unsupported):
        for name in spec.names:
            context.omit("declaration", name, resolution.reason, spec.line)
        return []

    return [
        ScannedType(
            name=name,
            kind=resolution.kind,
            value=None,
            doc=spec.doc,
            internal_type=resolution.internal_type,
            is_pointer=resolution.is_pointer,
            import_details=resolution.import_details,
        )
        for name in spec.names
    ]
