"""
Typed views over Go declaration nodes.

The extraction core reads declarations exclusively through the immutable
variants defined here. ``build_source_unit`` adapts a tree-sitter Go parse
tree into these views, so no extraction code inspects raw tree-sitter nodes.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union

from tree_sitter import Node, Tree

from scanner.config import (
    ARRAY_TYPE_NODES,
    COMMENT_NODE,
    COMPOSITE_LITERAL,
    CONST_DECLARATION,
    CONST_SPEC,
    FIELD_DECLARATION,
    FIELD_DECLARATION_LIST,
    IDENTIFIER,
    IMPORT_DECLARATION,
    IMPORT_SPEC,
    KEYED_ELEMENT,
    LITERAL_ELEMENT,
    LITERAL_KIND_MAP,
    MAP_TYPE,
    NAMED_TYPE_NODES,
    PACKAGE_CLAUSE,
    PARENTHESIZED_TYPE,
    POINTER_TYPE,
    QUALIFIED_TYPE,
    SPEC_LIST_NODES,
    STRUCT_TYPE,
    TYPE_DECLARATION,
    TYPE_SPEC_NODES,
    VAR_DECLARATION,
    VAR_SPEC,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Type expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NamedType:
    """A plain type name: ``int``, ``Item``."""

    name: str


@dataclass(frozen=True)
class QualifiedType:
    """A package-qualified type name: ``time.Time``."""

    package: str
    name: str


@dataclass(frozen=True)
class PointerType:
    target: "TypeExpr"


@dataclass(frozen=True)
class ArrayType:
    """Array or slice type; ``length`` is None for slices."""

    element: "TypeExpr"
    length: Optional[str] = None


@dataclass(frozen=True)
class MapType:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(frozen=True)
class StructType:
    """An anonymous struct type with its field list."""

    fields: Tuple["FieldDecl", ...] = ()


@dataclass(frozen=True)
class UnsupportedType:
    """Any type shape the extractor does not model (interfaces, funcs, ...)."""

    node_type: str
    text: str = ""


TypeExpr = Union[
    NamedType, QualifiedType, PointerType, ArrayType, MapType, StructType, UnsupportedType
]


def type_text(type_expr: TypeExpr) -> str:
    """Render a type expression back to Go-like text."""
    if isinstance(type_expr, NamedType):
        return type_expr.name
    if isinstance(type_expr, QualifiedType):
        return f"{type_expr.package}.{type_expr.name}"
    if isinstance(type_expr, PointerType):
        return "*" + type_text(type_expr.target)
    if isinstance(type_expr, ArrayType):
        return f"[{type_expr.length or ''}]{type_text(type_expr.element)}"
    if isinstance(type_expr, MapType):
        return f"map[{type_text(type_expr.key)}]{type_text(type_expr.value)}"
    if isinstance(type_expr, StructType):
        return "struct"
    return type_expr.text or type_expr.node_type


# ---------------------------------------------------------------------------
# Initializer expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BasicLit:
    """A literal; ``kind`` is the lower-cased literal form (``int``, ``string``)."""

    kind: str
    value: str


@dataclass(frozen=True)
class Ident:
    name: str


@dataclass(frozen=True)
class LiteralElement:
    """One entry of a composite literal body; ``key`` is None when positional."""

    value: str
    key: Optional[str] = None


@dataclass(frozen=True)
class CompositeLit:
    type: TypeExpr
    elements: Tuple[LiteralElement, ...] = ()


@dataclass(frozen=True)
class UnsupportedExpr:
    node_type: str
    text: str = ""


Expr = Union[BasicLit, Ident, CompositeLit, UnsupportedExpr]


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldDecl:
    """One struct field declaration; ``names`` is empty for embedded fields."""

    names: Tuple[str, ...]
    type: TypeExpr
    tag: str = ""
    doc: Optional[str] = None
    line: int = 0


@dataclass(frozen=True)
class TypeSpec:
    """A named type declaration: ``type Name <type>``."""

    name: str
    type: TypeExpr
    doc: Optional[str] = None
    line: int = 0
    is_alias: bool = False


@dataclass(frozen=True)
class ValueSpec:
    """A const/var spec: ``keyword names [type] [= values]``."""

    keyword: str
    names: Tuple[str, ...]
    type: Optional[TypeExpr] = None
    values: Tuple[Expr, ...] = ()
    doc: Optional[str] = None
    line: int = 0


Declaration = Union[TypeSpec, ValueSpec]


@dataclass(frozen=True)
class ImportSpec:
    path: str
    alias: Optional[str] = None

    @property
    def package_name(self) -> str:
        """Qualifier the import is referenced by in source."""
        if self.alias:
            return self.alias
        return self.path.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class SourceUnit:
    """All declarations visible in one parsed Go file, in source order."""

    path: str = ""
    package: Optional[str] = None
    imports: Tuple[ImportSpec, ...] = ()
    declarations: Tuple[Declaration, ...] = ()

    def import_paths(self) -> Dict[str, str]:
        """Map each import qualifier to its import path."""
        return {spec.package_name: spec.path for spec in self.imports}


# ---------------------------------------------------------------------------
# tree-sitter adapter
# ---------------------------------------------------------------------------

def _text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _named(node: Node) -> List[Node]:
    """Named children of a node, comments excluded."""
    return [child for child in node.named_children if child.type != COMMENT_NODE]


def clean_go_comment(comment_text: str) -> List[str]:
    """Strip ``//`` or ``/* */`` delimiters and return the comment lines."""
    stripped = comment_text.strip()
    if stripped.startswith("//"):
        return [stripped[2:].strip()]

    if stripped.startswith("/*"):
        stripped = stripped[2:]
    if stripped.endswith("*/"):
        stripped = stripped[:-2]

    lines = []
    for line in stripped.split("\n"):
        line = line.strip()
        if line.startswith("*"):
            line = line[1:].lstrip()
        if line:
            lines.append(line)
    return lines


def _is_trailing_comment(comment: Node) -> bool:
    previous = comment.prev_named_sibling
    return previous is not None and previous.end_point.row == comment.start_point.row


def get_preceding_comments(node: Node, source_bytes: bytes) -> Optional[str]:
    """Collect the doc comment lines directly above a declaration node.

    Walks backward through adjacent comment siblings; a blank line, a
    trailing comment of the previous statement, or a ``//go:`` directive
    ends the doc block.

    Returns:
        Cleaned comment text joined with newlines, or None.
    """
    comments = []
    sibling = node.prev_named_sibling
    expected_end_row = node.start_point.row

    while sibling is not None and sibling.type == COMMENT_NODE:
        if expected_end_row - sibling.end_point.row > 1:
            break
        if _is_trailing_comment(sibling):
            break

        comment_text = _text(sibling, source_bytes)
        if not comment_text.startswith("//go:"):
            comments.append(comment_text)

        expected_end_row = sibling.start_point.row
        sibling = sibling.prev_named_sibling

    comments.reverse()

    lines: List[str] = []
    for comment in comments:
        lines.extend(clean_go_comment(comment))
    if lines:
        return "\n".join(lines)
    return None


def build_type(node: Optional[Node], source_bytes: bytes) -> TypeExpr:
    """Convert a tree-sitter type node into a ``TypeExpr`` variant."""
    if node is None:
        return UnsupportedType(node_type="missing")

    if node.type in NAMED_TYPE_NODES:
        return NamedType(name=_text(node, source_bytes))

    if node.type == QUALIFIED_TYPE:
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        if package is None or name is None:
            return UnsupportedType(node_type=node.type, text=_text(node, source_bytes))
        return QualifiedType(package=_text(package, source_bytes), name=_text(name, source_bytes))

    if node.type == POINTER_TYPE:
        children = _named(node)
        target = children[0] if children else None
        return PointerType(target=build_type(target, source_bytes))

    if node.type in ARRAY_TYPE_NODES:
        length = node.child_by_field_name("length")
        return ArrayType(
            element=build_type(node.child_by_field_name("element"), source_bytes),
            length=_text(length, source_bytes) if length is not None else None,
        )

    if node.type == MAP_TYPE:
        return MapType(
            key=build_type(node.child_by_field_name("key"), source_bytes),
            value=build_type(node.child_by_field_name("value"), source_bytes),
        )

    if node.type == STRUCT_TYPE:
        for child in node.named_children:
            if child.type == FIELD_DECLARATION_LIST:
                return StructType(fields=tuple(build_fields(child, source_bytes)))
        return StructType()

    if node.type == PARENTHESIZED_TYPE:
        children = _named(node)
        if children:
            return build_type(children[0], source_bytes)

    return UnsupportedType(node_type=node.type, text=_text(node, source_bytes))


def build_fields(field_list: Node, source_bytes: bytes) -> Iterator[FieldDecl]:
    """Yield one ``FieldDecl`` per field_declaration, in source order."""
    for child in field_list.named_children:
        if child.type != FIELD_DECLARATION:
            continue

        names = tuple(
            _text(name, source_bytes)
            for name in child.children_by_field_name("name")
            if name.is_named
        )
        type_expr = build_type(child.child_by_field_name("type"), source_bytes)
        if not names and any(token.type == "*" for token in child.children):
            # Embedded pointer field: `*Base`
            type_expr = PointerType(target=type_expr)

        tag_node = child.child_by_field_name("tag")
        yield FieldDecl(
            names=names,
            type=type_expr,
            tag=_text(tag_node, source_bytes) if tag_node is not None else "",
            doc=get_preceding_comments(child, source_bytes),
            line=child.start_point.row + 1,
        )


def _literal_entry_text(node: Node, source_bytes: bytes) -> str:
    if node.type == LITERAL_ELEMENT:
        children = _named(node)
        if children:
            return _text(children[0], source_bytes)
    return _text(node, source_bytes)


def _build_elements(body: Optional[Node], source_bytes: bytes) -> Tuple[LiteralElement, ...]:
    if body is None:
        return ()

    elements = []
    for child in _named(body):
        if child.type == KEYED_ELEMENT:
            parts = _named(child)
            if len(parts) < 2:
                continue
            elements.append(
                LiteralElement(
                    key=_literal_entry_text(parts[0], source_bytes),
                    value=_literal_entry_text(parts[-1], source_bytes),
                )
            )
        else:
            elements.append(LiteralElement(value=_literal_entry_text(child, source_bytes)))
    return tuple(elements)


def build_expr(node: Node, source_bytes: bytes) -> Expr:
    """Convert a tree-sitter initializer node into an ``Expr`` variant."""
    if node.type in LITERAL_KIND_MAP:
        return BasicLit(kind=LITERAL_KIND_MAP[node.type], value=_text(node, source_bytes))

    if node.type == IDENTIFIER:
        return Ident(name=_text(node, source_bytes))

    if node.type == COMPOSITE_LITERAL:
        return CompositeLit(
            type=build_type(node.child_by_field_name("type"), source_bytes),
            elements=_build_elements(node.child_by_field_name("body"), source_bytes),
        )

    if node.type == "unary_expression":
        operand = node.child_by_field_name("operand")
        operator = node.child_by_field_name("operator")
        if operand is not None and operator is not None and _text(operator, source_bytes) == "-":
            inner = build_expr(operand, source_bytes)
            if isinstance(inner, BasicLit) and inner.kind in ("int", "float", "imag"):
                return BasicLit(kind=inner.kind, value="-" + inner.value)

    if node.type == "parenthesized_expression":
        children = _named(node)
        if len(children) == 1:
            return build_expr(children[0], source_bytes)

    return UnsupportedExpr(node_type=node.type, text=_text(node, source_bytes))


def _iter_specs(declaration: Node, spec_types: Tuple[str, ...]) -> Iterator[Node]:
    for child in declaration.named_children:
        if child.type in spec_types:
            yield child
        elif child.type in SPEC_LIST_NODES:
            yield from _iter_specs(child, spec_types)


def _spec_doc(spec: Node, declaration: Node, spec_count: int, source_bytes: bytes) -> Optional[str]:
    doc = get_preceding_comments(spec, source_bytes)
    if doc is None and spec_count == 1:
        doc = get_preceding_comments(declaration, source_bytes)
    return doc


def _build_type_specs(declaration: Node, source_bytes: bytes) -> Iterator[TypeSpec]:
    specs = list(_iter_specs(declaration, tuple(TYPE_SPEC_NODES)))
    for spec in specs:
        name = spec.child_by_field_name("name")
        if name is None:
            continue
        yield TypeSpec(
            name=_text(name, source_bytes),
            type=build_type(spec.child_by_field_name("type"), source_bytes),
            doc=_spec_doc(spec, declaration, len(specs), source_bytes),
            line=spec.start_point.row + 1,
            is_alias=spec.type == "type_alias",
        )


def _build_value_specs(declaration: Node, keyword: str, source_bytes: bytes) -> Iterator[ValueSpec]:
    spec_type = CONST_SPEC if keyword == "const" else VAR_SPEC
    specs = list(_iter_specs(declaration, (spec_type,)))
    for spec in specs:
        names = tuple(
            _text(name, source_bytes)
            for name in spec.children_by_field_name("name")
            if name.type == IDENTIFIER
        )
        type_node = spec.child_by_field_name("type")
        value_list = spec.child_by_field_name("value")
        values: Tuple[Expr, ...] = ()
        if value_list is not None:
            values = tuple(build_expr(expr, source_bytes) for expr in _named(value_list))

        yield ValueSpec(
            keyword=keyword,
            names=names,
            type=build_type(type_node, source_bytes) if type_node is not None else None,
            values=values,
            doc=_spec_doc(spec, declaration, len(specs), source_bytes),
            line=spec.start_point.row + 1,
        )


def _build_imports(declaration: Node, source_bytes: bytes) -> Iterator[ImportSpec]:
    for spec in _iter_specs(declaration, (IMPORT_SPEC,)):
        path = spec.child_by_field_name("path")
        if path is None:
            continue
        alias = spec.child_by_field_name("name")
        yield ImportSpec(
            path=_text(path, source_bytes).strip("\"`"),
            alias=_text(alias, source_bytes) if alias is not None else None,
        )


def build_source_unit(tree: Tree, source_bytes: bytes, path: str = "") -> SourceUnit:
    """Adapt a parsed Go file into a ``SourceUnit``.

    Args:
        tree: Parsed tree-sitter tree of a Go source file.
        source_bytes: The raw source bytes the tree was parsed from.
        path: File path recorded on the unit.

    Returns:
        SourceUnit with its package name, imports and top-level declarations.
    """
    package = None
    imports: List[ImportSpec] = []
    declarations: List[Declaration] = []

    for child in tree.root_node.named_children:
        if child.type == PACKAGE_CLAUSE:
            names = _named(child)
            if names:
                package = _text(names[0], source_bytes)
        elif child.type == IMPORT_DECLARATION:
            imports.extend(_build_imports(child, source_bytes))
        elif child.type == TYPE_DECLARATION:
            declarations.extend(_build_type_specs(child, source_bytes))
        elif child.type == CONST_DECLARATION:
            declarations.extend(_build_value_specs(child, "const", source_bytes))
        elif child.type == VAR_DECLARATION:
            declarations.extend(_build_value_specs(child, "var", source_bytes))

    logger.debug(
        "Built source unit %s: package=%s imports=%d declarations=%d",
        path or "<memory>",
        package,
        len(imports),
        len(declarations),
    )
    return SourceUnit(
        path=path,
        package=package,
        imports=tuple(imports),
        declarations=tuple(declarations),
    )
