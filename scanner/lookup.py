"""
Declaration lookup used while resolving element kinds and identifiers.

The index is built once per traversal from every visible declaration, so
cross-declaration lookups stay constant time and the walk stays linear.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from scanner.config import PREDECLARED_TYPES
from scanner.diagnostics import ScanDiagnostics
from scanner.nodes import (
    ArrayType,
    Declaration,
    Expr,
    NamedType,
    PointerType,
    QualifiedType,
    SourceUnit,
    TypeExpr,
    TypeSpec,
    ValueSpec,
)

logger = logging.getLogger(__name__)


class ResolutionCycle(Exception):
    """Raised internally when alias or identifier resolution loops back."""


class DeclarationIndex:
    """Identifier -> declaration lookup table for one traversal."""

    def __init__(self):
        self._types: Dict[str, TypeSpec] = {}
        self._values: Dict[str, Tuple[ValueSpec, int]] = {}

    @classmethod
    def from_units(cls, units: Iterable[SourceUnit]) -> "DeclarationIndex":
        index = cls()
        for unit in units:
            for declaration in unit.declarations:
                index.add(declaration)
        logger.debug(
            "Built declaration index: %d types, %d values",
            len(index._types),
            len(index._values),
        )
        return index

    def add(self, declaration: Declaration) -> None:
        if isinstance(declaration, TypeSpec):
            self._types.setdefault(declaration.name, declaration)
        elif isinstance(declaration, ValueSpec):
            for position, name in enumerate(declaration.names):
                if name == "_":
                    continue
                self._values.setdefault(name, (declaration, position))

    def type_spec(self, name: str) -> Optional[TypeSpec]:
        return self._types.get(name)

    def value_for(self, name: str) -> Optional[Tuple[ValueSpec, Expr]]:
        """Return the value spec declaring ``name`` and its initializer."""
        entry = self._values.get(name)
        if entry is None:
            return None
        spec, position = entry
        if not spec.values:
            return None
        if position < len(spec.values):
            return spec, spec.values[position]
        if len(spec.values) == 1:
            return spec, spec.values[0]
        return None


def resolve_named_kind(name: str, index: DeclarationIndex) -> TypeExpr:
    """Follow named-type aliases until a primitive or struct kind is reached.

    ``type Celsius float64`` resolves to ``float64``; ``type Row []Cell``
    continues into its element. A named struct declaration stops the walk and
    the struct's own name is kept.

    Returns:
        The terminal type expression. Undeclared names come back unchanged.

    Raises:
        ResolutionCycle: If the alias chain refers back to itself.
    """
    visited = set()

    while True:
        if name in PREDECLARED_TYPES:
            return NamedType(name=name)
        spec = index.type_spec(name)
        if spec is None:
            return NamedType(name=name)
        if name in visited:
            raise ResolutionCycle(name)
        visited.add(name)

        target = spec.type
        while isinstance(target, ArrayType):
            target = target.element
        if isinstance(target, PointerType):
            target = target.target

        if isinstance(target, NamedType):
            name = target.name
        elif isinstance(target, QualifiedType):
            return target
        else:
            # Structs, maps and other shapes keep their declared name
            return NamedType(name=name)


@dataclass
class ScanContext:
    """State shared by the extractors during one traversal."""

    index: DeclarationIndex = field(default_factory=DeclarationIndex)
    imports: Dict[str, str] = field(default_factory=dict)
    diagnostics: Optional[ScanDiagnostics] = None

    def omit(self, unit: str, name: str, reason: str, line: int = 0) -> None:
        if self.diagnostics is not None:
            self.diagnostics.record(unit, name, reason, line)

    def for_unit(self, unit: SourceUnit) -> "ScanContext":
        """Same index and diagnostics, with the imports of ``unit``."""
        return ScanContext(
            index=self.index,
            imports=unit.import_paths(),
            diagnostics=self.diagnostics,
        )
