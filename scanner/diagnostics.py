"""Optional sink recording declarations, fields and initializers that were skipped."""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Omission:
    """One unit dropped from the scanned model.

    Attributes:
        unit: What was dropped: ``field``, ``initializer`` or ``declaration``.
        name: Name of the enclosing identifier.
        reason: Short description of the unsupported shape.
        line: 1-indexed source line, 0 when unknown.
    """

    unit: str
    name: str
    reason: str
    line: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ScanDiagnostics:
    """Collects omissions without changing extraction output."""

    def __init__(self, source: str = ""):
        self.source = source
        self.omissions: List[Omission] = []

    def record(self, unit: str, name: str, reason: str, line: int = 0) -> None:
        omission = Omission(unit=unit, name=name, reason=reason, line=line)
        self.omissions.append(omission)
        logger.debug(
            "Skipped %s '%s' at %s:%d (%s)",
            unit,
            name,
            self.source or "<memory>",
            line,
            reason,
        )

    def __len__(self) -> int:
        return len(self.omissions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "omissions": [omission.to_dict() for omission in self.omissions],
        }
