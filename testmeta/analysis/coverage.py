"""
Coverage target resolver for covers and uses metadata.
"""
from typing import Dict, Optional, Tuple, Union
import logging

from testmeta.core import (
    CodeUnitSet,
    FactKind,
    MetadataCollection,
    COVERS_KINDS
)
from testmeta.exceptions import (
    AmbiguousDefaultClassError,
    InvalidCodeUnitError,
    InvalidCoversTargetError
)
from testmeta.introspection import CodeUnitMapper, Introspector, LineRanges
from testmeta.metadata import MetadataStore


class _TargetRules:
    """Which fact kinds drive a resolution and how they are reported."""

    def __init__(self, label: str, free_form: FactKind, default_class: FactKind,
                 typed: Dict[FactKind, str], reject_interfaces: bool):
        self.label = label
        self.free_form = free_form
        self.default_class = default_class
        self.typed = typed
        self.reject_interfaces = reject_interfaces


COVERS_RULES = _TargetRules(
    label="covers",
    free_form=FactKind.COVERS,
    default_class=FactKind.COVERS_DEFAULT_CLASS,
    typed={
        FactKind.COVERS_CLASS: "Class",
        FactKind.COVERS_METHOD: "Method",
        FactKind.COVERS_FUNCTION: "Function",
    },
    reject_interfaces=True
)

USES_RULES = _TargetRules(
    label="uses",
    free_form=FactKind.USES,
    default_class=FactKind.USES_DEFAULT_CLASS,
    typed={
        FactKind.USES_CLASS: "Class",
        FactKind.USES_METHOD: "Method",
        FactKind.USES_FUNCTION: "Function",
    },
    reject_interfaces=False
)


class CoverageResolver:
    """
    Resolves covers/uses facts into code units and source line ranges.
    """

    def __init__(self, store: MetadataStore, mapper: CodeUnitMapper, introspector: Introspector):
        """
        Initialize the coverage resolver.

        Args:
            store: Metadata store to read facts from
            mapper: Maps targets to code units and line ranges
            introspector: Used to detect interface targets
        """
        self.store = store
        self.mapper = mapper
        self.introspector = introspector
        self.logger = logging.getLogger(__name__)

    def should_code_coverage_be_collected_for(self, class_name: str, method_name: str) -> bool:
        for_class, for_method = self.store.metadata_for_class_and_method(class_name, method_name)

        # a covers fact on the method always wins
        if for_method.filter(*COVERS_KINDS).is_not_empty():
            return True

        if for_method.is_covers_nothing().is_not_empty():
            return False

        if for_class.is_covers_nothing().is_not_empty():
            return False

        return True

    def lines_to_be_covered(self, class_name: str, method_name: str) -> Union[LineRanges, bool]:
        """
        Get the source lines a test is meant to cover.

        Args:
            class_name: Qualified test class name
            method_name: Test method name

        Returns:
            Line ranges per file, or False when coverage must not be collected

        Raises:
            InvalidCoversTargetError: If a target is invalid or an interface
            AmbiguousDefaultClassError: If a scope has several default classes
        """
        if not self.should_code_coverage_be_collected_for(class_name, method_name):
            self.logger.debug(f"Coverage disabled for {class_name}::{method_name}")
            return False

        return self.mapper.to_line_ranges(self.code_units_to_be_covered(class_name, method_name))

    def lines_to_be_used(self, class_name: str, method_name: str) -> LineRanges:
        """Get the source lines a test may execute without covering them."""
        return self.mapper.to_line_ranges(self.code_units_to_be_used(class_name, method_name))

    def code_units_to_be_covered(self, class_name: str, method_name: str) -> CodeUnitSet:
        return self._code_units(class_name, method_name, COVERS_RULES)

    def code_units_to_be_used(self, class_name: str, method_name: str) -> CodeUnitSet:
        return self._code_units(class_name, method_name, USES_RULES)

    def _code_units(self, class_name: str, method_name: str, rules: _TargetRules) -> CodeUnitSet:
        for_class, for_method = self.store.metadata_for_class_and_method(class_name, method_name)
        shortcut = self._default_class(class_name, method_name, for_class, for_method, rules)

        units = CodeUnitSet()

        for fact in for_method.merge_with(for_class):
            if fact.kind in rules.typed:
                target = fact.as_string_for_mapper()
                try:
                    unit = self.mapper.resolve(target)
                except InvalidCodeUnitError as e:
                    raise InvalidCoversTargetError(
                        f'{rules.typed[fact.kind]} "{target}" is not a valid target for code coverage'
                    ) from e
                units = units.merge_with(CodeUnitSet([unit]))

            elif fact.kind == rules.free_form:
                target = fact.target

                if rules.reject_interfaces and self.introspector.is_interface(target):
                    raise InvalidCoversTargetError(f'Trying to cover interface "{target}".')

                if shortcut is not None and target.startswith("::"):
                    target = shortcut + target

                try:
                    unit = self.mapper.resolve(target)
                except InvalidCodeUnitError as e:
                    raise InvalidCoversTargetError(f'"{rules.label} {target}" is invalid') from e
                units = units.merge_with(CodeUnitSet([unit]))

        self.logger.debug(f"Resolved {len(units)} {rules.label} code units for {class_name}::{method_name}")
        return units

    def _default_class(self, class_name: str, method_name: str, for_class: MetadataCollection,
                       for_method: MetadataCollection, rules: _TargetRules) -> Optional[str]:
        scopes: Tuple[Tuple[str, MetadataCollection], ...] = (
            (f"method {class_name}::{method_name}", for_method),
            (f"class {class_name}", for_class),
        )
        shortcut = None

        for scope, metadata in scopes:
            declared = metadata.filter(rules.default_class)
            if len(declared) > 1:
                raise AmbiguousDefaultClassError(
                    f'More than one {rules.default_class.value} declaration for {scope}'
                )
            if shortcut is None and declared.is_not_empty():
                shortcut = declared.first().class_name

        return shortcut
