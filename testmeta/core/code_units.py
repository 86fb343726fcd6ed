"""
Resolved code units: the classes, methods and functions a test covers or uses.
"""
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict


class CodeUnitKind(str, Enum):
    CLASS = "class"
    METHOD = "method"
    FUNCTION = "function"


class CodeUnit(BaseModel):
    """A class, method or function that is known to exist and has source lines."""

    model_config = ConfigDict(frozen=True)

    kind: CodeUnitKind
    name: str
    file: str
    start_line: int
    end_line: int

    def __str__(self) -> str:
        return f"{self.kind.value} {self.name} ({self.file}:{self.start_line}-{self.end_line})"


class CodeUnitSet:
    """A set of code units. Iteration order is by file, then start line."""

    def __init__(self, units: Optional[Iterable[CodeUnit]] = None):
        self._units = frozenset(units or ())

    @classmethod
    def from_list(cls, units: Iterable[CodeUnit]) -> "CodeUnitSet":
        return cls(units)

    def merge_with(self, other: "CodeUnitSet") -> "CodeUnitSet":
        return CodeUnitSet(self._units | other._units)

    def __or__(self, other: "CodeUnitSet") -> "CodeUnitSet":
        return self.merge_with(other)

    def __iter__(self) -> Iterator[CodeUnit]:
        return iter(self.as_list())

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, unit: object) -> bool:
        return unit in self._units

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CodeUnitSet):
            return NotImplemented
        return self._units == other._units

    def __repr__(self) -> str:
        return f"CodeUnitSet({self.as_list()!r})"

    def is_empty(self) -> bool:
        return not self._units

    def as_list(self) -> List[CodeUnit]:
        return sorted(self._units, key=lambda unit: (unit.file, unit.start_line, unit.name))
