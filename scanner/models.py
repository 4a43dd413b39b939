"""
Data models for scanned Go declarations.

These types form the syntax-independent intermediate model handed to the
downstream generator. Every instance is built once, fully populated, and
never mutated afterwards.
"""

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple, Union


class InternalType(str, Enum):
    """Tag describing which kind of model entry a value represents."""

    CONST = "const"
    VAR = "var"
    MAP = "map"
    SLICE = "slice"
    STRUCT = "struct"


def _plain(value: Any) -> Any:
    if isinstance(value, InternalType):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


@dataclass(frozen=True)
class ImportDetails:
    """Origin of a package-qualified type reference (``pkg.Type``).

    Attributes:
        package_name: Package qualifier exactly as written in the source.
        entity: Referenced type name.
        package_path: Import path bound to the qualifier in the same file,
            or None if the qualifier is not imported there.
    """

    package_name: str
    entity: str
    package_path: Optional[str] = None


@dataclass(frozen=True)
class ScannedStructField:
    """Represents one classified struct field.

    Attributes:
        name: Field name (the type name for embedded fields).
        kind: Resolved type name, e.g. ``int``, ``struct`` or a slice/map
            element type.
        tag: Raw tag literal text as written, empty when absent.
        doc: Attached comment text, or None.
        is_pointer: Whether the field is declared as a pointer.
        import_details: Set only for package-qualified types.
        sub_fields: Set only for anonymous nested structs.
        internal_type: Shape tag of the field.
    """

    name: str
    kind: str
    tag: str = ""
    doc: Optional[str] = None
    is_pointer: bool = False
    import_details: Optional[ImportDetails] = None
    sub_fields: Optional[Tuple["ScannedStructField", ...]] = None
    internal_type: InternalType = InternalType.VAR

    def to_dict(self) -> Dict[str, Any]:
        """Convert the field to a dictionary suitable for JSON serialization."""
        return _plain(asdict(self))


@dataclass(frozen=True)
class ScannedStruct:
    """Represents one struct declaration.

    Attributes:
        name: Declared struct name.
        doc: Attached comment text, or None.
        fields: Classified fields in declaration order.
        line: 1-indexed line of the declaration.
        internal_type: Always ``InternalType.STRUCT``.
    """

    name: str
    doc: Optional[str] = None
    fields: Tuple[ScannedStructField, ...] = ()
    line: int = 0
    internal_type: InternalType = InternalType.STRUCT

    def to_dict(self) -> Dict[str, Any]:
        """Convert the struct to a dictionary suitable for JSON serialization."""
        return _plain(asdict(self))


ScannedValue = Union[str, Dict[str, str], List[str], None]


@dataclass(frozen=True)
class ScannedType:
    """Represents one constant/variable initializer entry.

    ``value`` holds the literal text for plain literals, an ordered dict for
    map composites, an ordered list for array/slice composites and None for
    typed variables without an initializer.
    """

    name: str
    kind: str
    value: ScannedValue = None
    doc: Optional[str] = None
    internal_type: InternalType = InternalType.CONST
    is_pointer: bool = False
    import_details: Optional[ImportDetails] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry to a dictionary suitable for JSON serialization."""
        return _plain(asdict(self))


@dataclass
class ScanResult:
    """Ordered structs and value entries produced by one extraction pass."""

    structs: List[ScannedStruct] = field(default_factory=list)
    types: List[ScannedType] = field(default_factory=list)

    def extend(self, other: "ScanResult") -> None:
        self.structs.extend(other.structs)
        self.types.extend(other.types)

    def is_empty(self) -> bool:
        return not self.structs and not self.types

    def __len__(self) -> int:
        return len(self.structs) + len(self.types)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "structs": [item.to_dict() for item in self.structs],
            "types": [item.to_dict() for item in self.types],
        }
