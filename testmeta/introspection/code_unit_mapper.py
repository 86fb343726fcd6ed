"""
Mapping of symbolic targets to code units and source line ranges.
"""
from typing import Any, Dict, List, Tuple
import abc
import inspect
import logging

from testmeta.core import CodeUnit, CodeUnitKind, CodeUnitSet
from testmeta.exceptions import IntrospectionError, InvalidCodeUnitError
from .base_introspector import Introspector
from .python_introspector import is_method_like, unwrap_method

LineRanges = Dict[str, List[Tuple[int, int]]]


class CodeUnitMapper(abc.ABC):
    """Turns ``Class``, ``Class::method`` and ``function`` targets into code units."""

    @abc.abstractmethod
    def resolve(self, target: str) -> CodeUnit:
        """
        Resolve a target string.

        Raises:
            InvalidCodeUnitError: If the target is malformed or does not exist
        """
        pass

    def to_line_ranges(self, units: CodeUnitSet) -> LineRanges:
        """
        Map code units to sorted, non-overlapping line ranges per source file.

        Args:
            units: The code units to map

        Returns:
            Dictionary of file path to ``(start_line, end_line)`` pairs
        """
        by_file: Dict[str, List[Tuple[int, int]]] = {}
        for unit in units:
            by_file.setdefault(unit.file, []).append((unit.start_line, unit.end_line))

        result: LineRanges = {}
        for file, ranges in sorted(by_file.items()):
            merged: List[Tuple[int, int]] = []
            for start, end in sorted(ranges):
                if merged and start <= merged[-1][1]:
                    merged[-1] = (merged[-1][0], max(merged[-1][1], end))
                else:
                    merged.append((start, end))
            result[file] = merged
        return result


class InspectCodeUnitMapper(CodeUnitMapper):
    """Mapper that reads source locations with ``inspect``."""

    def __init__(self, introspector: Introspector):
        self.introspector = introspector
        self.logger = logging.getLogger(__name__)

    def resolve(self, target: str) -> CodeUnit:
        target = target.strip()
        if not target:
            raise InvalidCodeUnitError("Empty code unit target")

        if "::" in target:
            class_name, _, method_name = target.partition("::")
            if not class_name or not method_name or "::" in method_name:
                raise InvalidCodeUnitError(f'"{target}" is not a valid method reference')

            try:
                cls = self.introspector.get_class(class_name)
            except IntrospectionError as e:
                raise InvalidCodeUnitError(f'Class "{class_name}" does not exist') from e

            attr = inspect.getattr_static(cls, method_name, None)
            if not is_method_like(attr):
                raise InvalidCodeUnitError(f'Method "{target}" does not exist')
            return self._unit(CodeUnitKind.METHOD, target, unwrap_method(attr))

        try:
            return self._unit(CodeUnitKind.CLASS, target, self.introspector.get_class(target))
        except IntrospectionError:
            pass

        try:
            return self._unit(CodeUnitKind.FUNCTION, target, self.introspector.get_function(target))
        except IntrospectionError as e:
            raise InvalidCodeUnitError(f'"{target}" is neither a class nor a function') from e

    def _unit(self, kind: CodeUnitKind, name: str, obj: Any) -> CodeUnit:
        try:
            file = inspect.getsourcefile(obj)
            lines, start_line = inspect.getsourcelines(obj)
        except (OSError, TypeError) as e:
            raise InvalidCodeUnitError(f'No source code available for {kind.value} "{name}"') from e

        if file is None:
            raise InvalidCodeUnitError(f'No source file available for {kind.value} "{name}"')

        unit = CodeUnit(
            kind=kind,
            name=name,
            file=file,
            start_line=start_line,
            end_line=start_line + len(lines) - 1
        )
        self.logger.debug(f"Resolved {unit}")
        return unit
