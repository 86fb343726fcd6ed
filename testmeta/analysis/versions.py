"""
Version comparison for requirement checks.
"""
from enum import Enum
from typing import Optional, Union
import operator as _operator
import re

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, ConfigDict

from testmeta.exceptions import InvalidVersionError, InvalidVersionOperatorError

_SANITIZE_PATTERN = re.compile(r"^(\d+\.\d+(?:\.\d+)?).*$", re.DOTALL)


def sanitize_version(version: str) -> str:
    """
    Trim anything after the ``<major>.<minor>[.<patch>]`` part of a version.

    ``"8.1.2-dev"`` becomes ``"8.1.2"``; strings that do not start with a
    dotted version are returned unchanged.
    """
    return _SANITIZE_PATTERN.sub(r"\1", version.strip())


class ComparisonOperator(str, Enum):
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    EQ = "=="
    NE = "!="

    @classmethod
    def parse(cls, text: Optional[str]) -> "ComparisonOperator":
        """
        Parse an operator, defaulting to ``>=`` when none is given.

        Raises:
            InvalidVersionOperatorError: If the operator is not supported
        """
        if isinstance(text, ComparisonOperator):
            return text
        if text is None or not text.strip():
            return cls.GE

        text = text.strip()
        try:
            return cls(_ALIASES.get(text.lower(), text))
        except ValueError:
            raise InvalidVersionOperatorError(f'"{text}" is not a valid version comparison operator') from None


_ALIASES = {
    "lt": "<",
    "le": "<=",
    "gt": ">",
    "ge": ">=",
    "=": "==",
    "eq": "==",
    "ne": "!=",
    "<>": "!=",
}

_COMPARATORS = {
    ComparisonOperator.LT: _operator.lt,
    ComparisonOperator.LE: _operator.le,
    ComparisonOperator.GT: _operator.gt,
    ComparisonOperator.GE: _operator.ge,
    ComparisonOperator.EQ: _operator.eq,
    ComparisonOperator.NE: _operator.ne,
}


class VersionConstraint:
    """A PEP 440 version constraint such as ``>=3.9,<4``."""

    def __init__(self, expression: str):
        try:
            self._specifier = SpecifierSet(expression)
        except InvalidSpecifier as e:
            raise InvalidVersionError(f'"{expression}" is not a valid version constraint') from e
        self.expression = expression

    def complies(self, version: str) -> bool:
        try:
            parsed = Version(sanitize_version(version))
        except InvalidVersion:
            return False
        return self._specifier.contains(parsed, prereleases=True)

    def as_string(self) -> str:
        return self.expression

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionConstraint):
            return NotImplemented
        return self._specifier == other._specifier

    def __hash__(self) -> int:
        return hash(self._specifier)

    def __repr__(self) -> str:
        return f"VersionConstraint({self.expression!r})"


class VersionRequirement(BaseModel):
    """A required version for one operand, e.g. ``python >= 3.10``."""

    model_config = ConfigDict(frozen=True)

    operand: str
    version: str
    operator: ComparisonOperator = ComparisonOperator.GE
    line: Optional[int] = None

    def is_satisfied_by(self, actual: Optional[str]) -> bool:
        if actual is None:
            return False
        return compare(actual, self.version, self.operator)


def compare(actual: str, required: Union[str, VersionConstraint],
            operator: Union[str, ComparisonOperator, None] = None) -> bool:
    """
    Check an actual version against a required version or constraint.

    Args:
        actual: The version found in the environment
        required: A dotted version or a ``VersionConstraint``
        operator: Comparison operator for a dotted version; ignored for constraints

    Returns:
        Whether ``actual`` satisfies the requirement. An unparseable actual
        version never does.

    Raises:
        InvalidVersionError: If the required version cannot be parsed
    """
    if isinstance(required, VersionConstraint):
        return required.complies(actual)

    comparator = _COMPARATORS[ComparisonOperator.parse(operator)]

    try:
        required_version = Version(sanitize_version(required))
    except InvalidVersion as e:
        raise InvalidVersionError(f'"{required}" is not a valid version') from e

    try:
        actual_version = Version(sanitize_version(actual))
    except InvalidVersion:
        return False

    return comparator(actual_version, required_version)
