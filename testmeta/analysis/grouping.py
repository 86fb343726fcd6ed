"""
Grouping and classification of tests: groups, size, dependencies, settings.
"""
from typing import List, Optional
import logging

from testmeta.core import (
    BackupSettings,
    ExecutionOrderDependency,
    FactKind,
    MetadataCollection,
    TestSize,
    COVERS_TARGET_KINDS,
    USES_TARGET_KINDS
)
from testmeta.metadata import MetadataStore

COVERS_GROUP_PREFIX = "__covers_"
USES_GROUP_PREFIX = "__uses_"


def canonicalize_name(name: str) -> str:
    return name.strip(".").lower()


class GroupingResolver:
    """Derives groups, size, dependencies and boolean settings from merged metadata."""

    def __init__(self, store: MetadataStore):
        self.store = store
        self.logger = logging.getLogger(__name__)

    def groups(self, class_name: str, method_name: Optional[str] = None) -> List[str]:
        """
        Get the effective groups of a test.

        Besides declared groups, every covers target adds ``__covers_<target>``
        and every uses target adds ``__uses_<target>``.

        Args:
            class_name: Qualified test class name
            method_name: Test method name, or None for class-level groups

        Returns:
            Deduplicated group names in first-seen order
        """
        for_class, for_method = self.store.metadata_for_class_and_method(class_name, method_name)

        groups: List[str] = []
        for fact in for_method.merge_with(for_class):
            if fact.kind == FactKind.GROUP:
                groups.append(fact.group_name)
            elif fact.kind in COVERS_TARGET_KINDS:
                groups.append(COVERS_GROUP_PREFIX + canonicalize_name(fact.as_string_for_mapper()))
            elif fact.kind == FactKind.COVERS:
                groups.append(COVERS_GROUP_PREFIX + canonicalize_name(fact.target))
            elif fact.kind in USES_TARGET_KINDS:
                groups.append(USES_GROUP_PREFIX + canonicalize_name(fact.as_string_for_mapper()))
            elif fact.kind == FactKind.USES:
                groups.append(USES_GROUP_PREFIX + canonicalize_name(fact.target))

        return list(dict.fromkeys(groups))

    def size(self, class_name: str, method_name: Optional[str] = None) -> TestSize:
        groups = set(self.groups(class_name, method_name))

        for size in (TestSize.LARGE, TestSize.MEDIUM, TestSize.SMALL):
            if size.value in groups:
                return size

        return TestSize.UNKNOWN

    def dependencies(self, class_name: str, method_name: str) -> List[ExecutionOrderDependency]:
        """
        Get the tests a test depends on.

        Class-level dependencies come first, then method-level ones. Targets
        without a class refer to ``class_name``.

        Args:
            class_name: Qualified test class name
            method_name: Test method name

        Returns:
            Dependencies, deduplicated by target
        """
        for_class, for_method = self.store.metadata_for_class_and_method(class_name, method_name)

        dependencies: List[ExecutionOrderDependency] = []
        seen = set()

        for fact in for_class.merge_with(for_method).is_depends():
            dependency = ExecutionOrderDependency.from_depends(class_name, fact.target, fact.clone_option)
            if dependency is None or dependency.target() in seen:
                continue
            seen.add(dependency.target())
            dependencies.append(dependency)

        return dependencies

    def backup_settings(self, class_name: str, method_name: str) -> BackupSettings:
        for_class, for_method = self.store.metadata_for_class_and_method(class_name, method_name)

        return BackupSettings(
            backup_globals=self._boolean_setting(for_class, for_method, FactKind.BACKUP_GLOBALS),
            backup_static_properties=self._boolean_setting(
                for_class, for_method, FactKind.BACKUP_STATIC_PROPERTIES
            )
        )

    def preserve_global_state(self, class_name: str, method_name: str) -> Optional[bool]:
        for_class, for_method = self.store.metadata_for_class_and_method(class_name, method_name)
        return self._boolean_setting(for_class, for_method, FactKind.PRESERVE_GLOBAL_STATE)

    def process_isolation(self, class_name: str, method_name: str) -> bool:
        """Whether the test runs in its own process."""
        for_class, for_method = self.store.metadata_for_class_and_method(class_name, method_name)

        return (for_class.filter(FactKind.RUN_TESTS_IN_SEPARATE_PROCESSES).is_not_empty()
                or for_method.filter(FactKind.RUN_IN_SEPARATE_PROCESS).is_not_empty())

    def class_process_isolation(self, class_name: str, method_name: str) -> bool:
        """Whether the whole class runs in one separate process."""
        for_class, _ = self.store.metadata_for_class_and_method(class_name, method_name)
        return for_class.filter(FactKind.RUN_CLASS_IN_SEPARATE_PROCESS).is_not_empty()

    def _boolean_setting(self, for_class: MetadataCollection, for_method: MetadataCollection,
                         kind: FactKind) -> Optional[bool]:
        # method wins over class; an unset value falls through
        for metadata in (for_method, for_class):
            declared = metadata.filter(kind)
            if declared.is_not_empty() and declared.first().enabled is not None:
                return declared.first().enabled
        return None
