"""
Core module for TestMeta facts, collections and resolver results.
"""

from .facts import (
    FactKind,
    RequirementOperand,
    CloneOption,
    MetadataFact,
    Covers,
    CoversClass,
    CoversMethod,
    CoversFunction,
    CoversNothing,
    CoversDefaultClass,
    Uses,
    UsesClass,
    UsesMethod,
    UsesFunction,
    UsesDefaultClass,
    Group,
    Test,
    Before,
    After,
    BeforeClass,
    AfterClass,
    PreCondition,
    PostCondition,
    BackupGlobals,
    BackupStaticProperties,
    PreserveGlobalState,
    Requires,
    Depends,
    RunTestsInSeparateProcesses,
    RunInSeparateProcess,
    RunClassInSeparateProcess,
    COVERS_KINDS,
    COVERS_TARGET_KINDS,
    USES_KINDS,
    USES_TARGET_KINDS,
    parse_facts,
    split_version_operator
)
from .collection import MetadataCollection
from .code_units import CodeUnit, CodeUnitKind, CodeUnitSet
from .decisions import (
    HookKind,
    HookMethodTable,
    DEFAULT_HOOK_METHODS,
    TestSize,
    BackupSettings,
    ExecutionOrderDependency
)

__all__ = [
    "FactKind",
    "RequirementOperand",
    "CloneOption",
    "MetadataFact",
    "Covers",
    "CoversClass",
    "CoversMethod",
    "CoversFunction",
    "CoversNothing",
    "CoversDefaultClass",
    "Uses",
    "UsesClass",
    "UsesMethod",
    "UsesFunction",
    "UsesDefaultClass",
    "Group",
    "Test",
    "Before",
    "After",
    "BeforeClass",
    "AfterClass",
    "PreCondition",
    "PostCondition",
    "BackupGlobals",
    "BackupStaticProperties",
    "PreserveGlobalState",
    "Requires",
    "Depends",
    "RunTestsInSeparateProcesses",
    "RunInSeparateProcess",
    "RunClassInSeparateProcess",
    "COVERS_KINDS",
    "COVERS_TARGET_KINDS",
    "USES_KINDS",
    "USES_TARGET_KINDS",
    "parse_facts",
    "split_version_operator",
    "MetadataCollection",
    "CodeUnit",
    "CodeUnitKind",
    "CodeUnitSet",
    "HookKind",
    "HookMethodTable",
    "DEFAULT_HOOK_METHODS",
    "TestSize",
    "BackupSettings",
    "ExecutionOrderDependency"
]
