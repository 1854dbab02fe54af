"""Finding model emitted by the matcher."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FindingLevel(str, Enum):
    """Severity of a finding. Criticals always sort before warnings."""

    CRITICAL = "critical"
    WARNING = "warning"

    @property
    def rank(self) -> int:
        return 0 if self is FindingLevel.CRITICAL else 1


@dataclass(frozen=True, slots=True)
class Finding:
    """An installed package that matches, or sits next to, a blocked version."""

    level: FindingLevel
    name: str
    version: str
    against: str

    def __post_init__(self) -> None:
        if not isinstance(self.level, FindingLevel):
            raise ValueError(f"Invalid finding level: {self.level!r}")
        if not self.name:
            raise ValueError("Finding package name must be non-empty")
        if not self.version or not self.against:
            raise ValueError("Finding versions must be non-empty strings")

    @property
    def is_critical(self) -> bool:
        return self.level is FindingLevel.CRITICAL

    def to_dict(self) -> dict[str, str]:
        return {
            "level": self.level.value,
            "name": self.name,
            "version": self.version,
            "against": self.against,
        }
