"""
Struct extraction and field classification.

Each field is classified by its declared type shape. Fields whose shape is
not supported are dropped without interrupting their siblings; the optional
diagnostics channel records why.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from scanner.config import STRUCT_KIND
from scanner.lookup import ResolutionCycle, ScanContext, resolve_named_kind
from scanner.models import ImportDetails, InternalType, ScannedStruct, ScannedStructField
from scanner.nodes import (
    ArrayType,
    FieldDecl,
    MapType,
    NamedType,
    PointerType,
    QualifiedType,
    StructType,
    TypeExpr,
    TypeSpec,
    UnsupportedType,
    type_text,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeResolution:
    """Resolved shape of a declared type, shared by fields and typed vars."""

    kind: str
    internal_type: InternalType = InternalType.VAR
    is_pointer: bool = False
    import_details: Optional[ImportDetails] = None
    sub_fields: Optional[Tuple[ScannedStructField, ...]] = None


@dataclass(frozen=True)
class Unsupported:
    reason: str


def _import_details(type_expr: QualifiedType, context: ScanContext) -> ImportDetails:
    return ImportDetails(
        package_name=type_expr.package,
        entity=type_expr.name,
        package_path=context.imports.get(type_expr.package),
    )


def resolve_element_kind(
    element: TypeExpr,
    context: ScanContext,
) -> Union[TypeResolution, Unsupported]:
    """Resolve the kind of values held by an array or slice.

    Named elements are followed through the declaration index; nested
    arrays resolve to their innermost element.
    """
    while isinstance(element, ArrayType):
        element = element.element
    if isinstance(element, PointerType):
        element = element.target

    if isinstance(element, NamedType):
        try:
            element = resolve_named_kind(element.name, context.index)
        except ResolutionCycle as exc:
            return Unsupported(f"cyclic type alias '{exc}'")

    if isinstance(element, NamedType):
        return TypeResolution(kind=element.name, internal_type=InternalType.SLICE)
    if isinstance(element, QualifiedType):
        return TypeResolution(
            kind=element.name,
            internal_type=InternalType.SLICE,
            import_details=_import_details(element, context),
        )
    if isinstance(element, StructType):
        return TypeResolution(
            kind=STRUCT_KIND,
            internal_type=InternalType.SLICE,
            sub_fields=extract_fields(element.fields, context),
        )
    return Unsupported(f"unsupported element type '{type_text(element)}'")


def resolve_type(type_expr: TypeExpr, context: ScanContext) -> Union[TypeResolution, Unsupported]:
    """Classify a declared type by shape.

    Returns:
        TypeResolution for supported shapes, Unsupported with a reason
        otherwise. Never raises on unexpected shapes.
    """
    if isinstance(type_expr, NamedType):
        return TypeResolution(kind=type_expr.name)

    if isinstance(type_expr, QualifiedType):
        return TypeResolution(
            kind=type_expr.name,
            import_details=_import_details(type_expr, context),
        )

    if isinstance(type_expr, MapType):
        value = type_expr.value
        if isinstance(value, QualifiedType):
            return TypeResolution(
                kind=value.name,
                internal_type=InternalType.MAP,
                import_details=_import_details(value, context),
            )
        return TypeResolution(kind=type_text(value), internal_type=InternalType.MAP)

    if isinstance(type_expr, StructType):
        return TypeResolution(
            kind=STRUCT_KIND,
            internal_type=InternalType.STRUCT,
            sub_fields=extract_fields(type_expr.fields, context),
        )

    if isinstance(type_expr, ArrayType):
        return resolve_element_kind(type_expr.element, context)

    if isinstance(type_expr, PointerType):
        target = type_expr.target
        if isinstance(target, NamedType):
            return TypeResolution(kind=target.name, is_pointer=True)
        if isinstance(target, ArrayType):
            return Unsupported("pointer to array")
        if isinstance(target, MapType):
            return Unsupported("pointer to map")
        return Unsupported(f"pointer to '{type_text(target)}'")

    if isinstance(type_expr, UnsupportedType):
        return Unsupported(f"unsupported type '{type_expr.node_type}'")
    return Unsupported(f"unsupported type '{type_text(type_expr)}'")


def _embedded_name(type_expr: TypeExpr) -> Optional[str]:
    if isinstance(type_expr, PointerType):
        type_expr = type_expr.target
    if isinstance(type_expr, (NamedType, QualifiedType)):
        return type_expr.name
    return None


def classify_field(field: FieldDecl, context: ScanContext) -> List[ScannedStructField]:
    """Classify one field declaration.

    Args:
        field: The field to classify.
        context: Index, imports and diagnostics of the current traversal.

    Returns:
        One ScannedStructField per declared name, in order; an empty list
        when the field's shape is unsupported.
    """
    names = field.names
    if not names:
        embedded = _embedded_name(field.type)
        if embedded is None:
            context.omit("field", "<embedded>", "unsupported embedded type", field.line)
            return []
        names = (embedded,)

    resolution = resolve_type(field.type, context)
    if isinstance(resolution, Unsupported):
        context.omit("field", names[0], resolution.reason, field.line)
        return []

    return [
        ScannedStructField(
            name=name,
            kind=resolution.kind,
            tag=field.tag,
            doc=field.doc,
            is_pointer=resolution.is_pointer,
            import_details=resolution.import_details,
            sub_fields=resolution.sub_fields,
            internal_type=resolution.internal_type,
        )
        for name in names
    ]


def extract_fields(fields: Iterable[FieldDecl], context: ScanContext) -> Tuple[ScannedStructField, ...]:
    """Classify a field list in declaration order, skipping unsupported fields."""
    scanned: List[ScannedStructField] = []
    for field in fields:
        scanned.extend(classify_field(field, context))
    return tuple(scanned)


def extract_struct(spec: TypeSpec, context: ScanContext) -> Optional[ScannedStruct]:
    """Build a ScannedStruct from a struct-shaped type declaration.

    Returns:
        The struct model, or None if the declaration is not a struct.
    """
    if not isinstance(spec.type, StructType):
        return None

    fields = extract_fields(spec.type.fields, context)
    logger.debug(
        "Extracted struct %s with %d/%d fields",
        spec.name,
        len(fields),
        len(spec.type.fields),
    )
    return ScannedStruct(
        name=spec.name,
        doc=spec.doc,
        fields=fields,
        line=spec.line,
    )
