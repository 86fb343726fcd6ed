"""
Main TestMetadataEngine class wiring the store, introspection and resolvers.
"""
from typing import Any, Dict, Iterable, List, Optional, Union
import logging

from testmeta.analysis import (
    CoverageResolver,
    GroupingResolver,
    HookMethodResolver,
    RequirementResolver
)
from testmeta.core import BackupSettings, CodeUnitSet, ExecutionOrderDependency, HookMethodTable, TestSize
from testmeta.environment import RuntimeEnvironment
from testmeta.exceptions import CodeCoverageError
from testmeta.introspection import (
    CodeUnitMapper,
    InspectCodeUnitMapper,
    Introspector,
    LineRanges,
    PythonIntrospector
)
from testmeta.metadata import MetadataReader, MetadataStore, get_metadata_reader


class TestMetadataEngine:
    """
    The entry point the test runner queries, once per test method.

    Every query takes a qualified class name and, where it applies, a method
    name.
    """

    __test__ = False

    def __init__(self, reader: Optional[MetadataReader] = None,
                 introspector: Optional[Introspector] = None,
                 mapper: Optional[CodeUnitMapper] = None,
                 environment: Optional[RuntimeEnvironment] = None,
                 framework_bases: Optional[Iterable[str]] = None,
                 reader_type: str = "attribute",
                 reader_config: Optional[Dict[str, Any]] = None):
        """
        Initialize a new engine.

        Args:
            reader: Metadata reader; built from ``reader_type`` when omitted
            introspector: Class introspection; a ``PythonIntrospector`` by default
            mapper: Code-unit mapper; an ``InspectCodeUnitMapper`` by default
            environment: Environment for requirement checks; detected by default
            framework_bases: Base classes whose methods are never hooks
            reader_type: Type of reader ('attribute', 'mapping', 'json')
            reader_config: Configuration for the reader
        """
        self.logger = logging.getLogger(__name__)

        self.introspector = introspector or PythonIntrospector()
        self.mapper = mapper or InspectCodeUnitMapper(self.introspector)
        self.environment = environment or RuntimeEnvironment.detect()

        if reader is None:
            reader = get_metadata_reader(reader_type, self.introspector, **(reader_config or {}))
        self.store = MetadataStore(reader, self.introspector)

        self.requirements = RequirementResolver(self.store, self.environment, self.introspector)
        self.coverage = CoverageResolver(self.store, self.mapper, self.introspector)
        self.grouping = GroupingResolver(self.store)
        self.hooks = HookMethodResolver(self.store, self.introspector, framework_bases)

        self.logger.debug(f"Initialized engine with {reader.__class__.__name__}")

    def missing_requirements(self, class_name: str, method_name: str) -> List[str]:
        return self.requirements.missing_requirements_for(class_name, method_name)

    def should_code_coverage_be_collected_for(self, class_name: str, method_name: str) -> bool:
        return self.coverage.should_code_coverage_be_collected_for(class_name, method_name)

    def lines_to_be_covered(self, class_name: str, method_name: str) -> Union[LineRanges, bool]:
        return self.coverage.lines_to_be_covered(class_name, method_name)

    def lines_to_be_used(self, class_name: str, method_name: str) -> LineRanges:
        return self.coverage.lines_to_be_used(class_name, method_name)

    def code_units_to_be_covered(self, class_name: str, method_name: str) -> CodeUnitSet:
        return self.coverage.code_units_to_be_covered(class_name, method_name)

    def code_units_to_be_used(self, class_name: str, method_name: str) -> CodeUnitSet:
        return self.coverage.code_units_to_be_used(class_name, method_name)

    def groups(self, class_name: str, method_name: Optional[str] = None) -> List[str]:
        return self.grouping.groups(class_name, method_name)

    def size(self, class_name: str, method_name: Optional[str] = None) -> TestSize:
        return self.grouping.size(class_name, method_name)

    def dependencies(self, class_name: str, method_name: str) -> List[ExecutionOrderDependency]:
        return self.grouping.dependencies(class_name, method_name)

    def backup_settings(self, class_name: str, method_name: str) -> BackupSettings:
        return self.grouping.backup_settings(class_name, method_name)

    def preserve_global_state(self, class_name: str, method_name: str) -> Optional[bool]:
        return self.grouping.preserve_global_state(class_name, method_name)

    def process_isolation(self, class_name: str, method_name: str) -> bool:
        return self.grouping.process_isolation(class_name, method_name)

    def class_process_isolation(self, class_name: str, method_name: str) -> bool:
        return self.grouping.class_process_isolation(class_name, method_name)

    def hook_methods(self, class_name: str) -> HookMethodTable:
        return self.hooks.hook_methods(class_name)

    def is_test_method(self, class_name: str, method_name: str) -> bool:
        return self.hooks.is_test_method(class_name, method_name)

    def describe(self, class_name: str, method_name: str) -> Dict[str, Any]:
        """
        Resolve every decision for one test method.

        Coverage errors are reported under ``"error"`` instead of raised.

        Args:
            class_name: Qualified test class name
            method_name: Test method name

        Returns:
            Dictionary of decision name to a JSON-compatible value
        """
        backup = self.backup_settings(class_name, method_name)
        result: Dict[str, Any] = {
            "test": f"{class_name}::{method_name}",
            "missing_requirements": self.missing_requirements(class_name, method_name),
            "groups": self.groups(class_name, method_name),
            "size": self.size(class_name, method_name).value,
            "dependencies": [str(dependency) for dependency in self.dependencies(class_name, method_name)],
            "backup_globals": backup.backup_globals,
            "backup_static_properties": backup.backup_static_properties,
            "preserve_global_state": self.preserve_global_state(class_name, method_name),
            "process_isolation": self.process_isolation(class_name, method_name),
            "class_process_isolation": self.class_process_isolation(class_name, method_name),
            "hook_methods": self.hook_methods(class_name).as_dict(),
        }

        errors = []

        try:
            covered = self.lines_to_be_covered(class_name, method_name)
            result["lines_to_be_covered"] = covered if covered is False else {
                file: [list(lines) for lines in ranges] for file, ranges in covered.items()
            }
        except CodeCoverageError as e:
            self.logger.error(f"Failed to resolve coverage targets: {e}")
            errors.append(str(e))

        try:
            result["lines_to_be_used"] = {
                file: [list(lines) for lines in ranges]
                for file, ranges in self.lines_to_be_used(class_name, method_name).items()
            }
        except CodeCoverageError as e:
            self.logger.error(f"Failed to resolve uses targets: {e}")
            errors.append(str(e))

        if errors:
            result["error"] = "; ".join(errors)

        return result
