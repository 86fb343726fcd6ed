"""
Metadata facts attached to test classes and test methods.

Every fact kind is its own immutable model, discriminated by ``kind``.
"""
from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union
import re

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class FactKind(str, Enum):
    """All kinds of metadata a class or method can carry."""

    COVERS = "covers"
    COVERS_CLASS = "coversClass"
    COVERS_METHOD = "coversMethod"
    COVERS_FUNCTION = "coversFunction"
    COVERS_NOTHING = "coversNothing"
    COVERS_DEFAULT_CLASS = "coversDefaultClass"
    USES = "uses"
    USES_CLASS = "usesClass"
    USES_METHOD = "usesMethod"
    USES_FUNCTION = "usesFunction"
    USES_DEFAULT_CLASS = "usesDefaultClass"
    GROUP = "group"
    TEST = "test"
    BEFORE = "before"
    AFTER = "after"
    BEFORE_CLASS = "beforeClass"
    AFTER_CLASS = "afterClass"
    PRE_CONDITION = "preCondition"
    POST_CONDITION = "postCondition"
    BACKUP_GLOBALS = "backupGlobals"
    BACKUP_STATIC_PROPERTIES = "backupStaticProperties"
    PRESERVE_GLOBAL_STATE = "preserveGlobalState"
    REQUIRES = "requires"
    DEPENDS = "depends"
    RUN_TESTS_IN_SEPARATE_PROCESSES = "runTestsInSeparateProcesses"
    RUN_IN_SEPARATE_PROCESS = "runInSeparateProcess"
    RUN_CLASS_IN_SEPARATE_PROCESS = "runClassInSeparateProcess"


COVERS_TARGET_KINDS = (FactKind.COVERS_CLASS, FactKind.COVERS_METHOD, FactKind.COVERS_FUNCTION)
COVERS_KINDS = (FactKind.COVERS,) + COVERS_TARGET_KINDS
USES_TARGET_KINDS = (FactKind.USES_CLASS, FactKind.USES_METHOD, FactKind.USES_FUNCTION)
USES_KINDS = (FactKind.USES,) + USES_TARGET_KINDS


class RequirementOperand(str, Enum):
    """What a ``Requires`` fact constrains."""

    PYTHON = "python"
    FRAMEWORK = "framework"
    EXTENSION = "extension"
    SETTING = "setting"
    OS = "os"
    OS_FAMILY = "osFamily"
    FUNCTION = "function"


VERSIONED_OPERANDS = (RequirementOperand.PYTHON, RequirementOperand.FRAMEWORK, RequirementOperand.EXTENSION)

_VERSION_OPERATOR_PATTERN = re.compile(r"^\s*(<=|>=|==|!=|<>|<|>|=)?\s*(\S+)\s*$")
_DOTTED_VERSION_PATTERN = re.compile(r"^\d+\.\d+")


def split_version_operator(text: str) -> Tuple[Optional[str], str]:
    """
    Split a leading comparison operator off a version.

    ``">= 8.0"`` gives ``(">=", "8.0")`` and ``"8.0"`` gives ``(None, "8.0")``.
    """
    match = _VERSION_OPERATOR_PATTERN.match(text)
    if match is None:
        return None, text.strip()
    return match.group(1), match.group(2)


def _is_valid_version(text: str) -> bool:
    if _DOTTED_VERSION_PATTERN.match(text):
        return True
    try:
        Version(text)
    except InvalidVersion:
        return False
    return True


class CloneOption(str, Enum):
    """How the return value of a dependency is handed to the dependent test."""

    DEEP = "clone"
    SHALLOW = "shallowClone"


class MetadataFact(BaseModel):
    """Base class for all metadata facts."""

    model_config = ConfigDict(frozen=True)

    kind: FactKind

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.kind.value})"


class Covers(MetadataFact):
    """Free-form coverage target such as ``pkg.Class::method`` or ``::method``."""

    kind: Literal[FactKind.COVERS] = FactKind.COVERS
    target: str


class CoversClass(MetadataFact):
    kind: Literal[FactKind.COVERS_CLASS] = FactKind.COVERS_CLASS
    class_name: str

    def as_string_for_mapper(self) -> str:
        return self.class_name


class CoversMethod(MetadataFact):
    kind: Literal[FactKind.COVERS_METHOD] = FactKind.COVERS_METHOD
    class_name: str
    method_name: str

    def as_string_for_mapper(self) -> str:
        return f"{self.class_name}::{self.method_name}"


class CoversFunction(MetadataFact):
    kind: Literal[FactKind.COVERS_FUNCTION] = FactKind.COVERS_FUNCTION
    function_name: str

    def as_string_for_mapper(self) -> str:
        return self.function_name


class CoversNothing(MetadataFact):
    kind: Literal[FactKind.COVERS_NOTHING] = FactKind.COVERS_NOTHING


class CoversDefaultClass(MetadataFact):
    kind: Literal[FactKind.COVERS_DEFAULT_CLASS] = FactKind.COVERS_DEFAULT_CLASS
    class_name: str


class Uses(MetadataFact):
    """Free-form uses target, same syntax as ``Covers``."""

    kind: Literal[FactKind.USES] = FactKind.USES
    target: str


class UsesClass(MetadataFact):
    kind: Literal[FactKind.USES_CLASS] = FactKind.USES_CLASS
    class_name: str

    def as_string_for_mapper(self) -> str:
        return self.class_name


class UsesMethod(MetadataFact):
    kind: Literal[FactKind.USES_METHOD] = FactKind.USES_METHOD
    class_name: str
    method_name: str

    def as_string_for_mapper(self) -> str:
        return f"{self.class_name}::{self.method_name}"


class UsesFunction(MetadataFact):
    kind: Literal[FactKind.USES_FUNCTION] = FactKind.USES_FUNCTION
    function_name: str

    def as_string_for_mapper(self) -> str:
        return self.function_name


class UsesDefaultClass(MetadataFact):
    kind: Literal[FactKind.USES_DEFAULT_CLASS] = FactKind.USES_DEFAULT_CLASS
    class_name: str


class Group(MetadataFact):
    kind: Literal[FactKind.GROUP] = FactKind.GROUP
    group_name: str


class Test(MetadataFact):
    """Marks a method as a test regardless of its name."""

    __test__ = False

    kind: Literal[FactKind.TEST] = FactKind.TEST


class Before(MetadataFact):
    kind: Literal[FactKind.BEFORE] = FactKind.BEFORE


class After(MetadataFact):
    kind: Literal[FactKind.AFTER] = FactKind.AFTER


class BeforeClass(MetadataFact):
    kind: Literal[FactKind.BEFORE_CLASS] = FactKind.BEFORE_CLASS


class AfterClass(MetadataFact):
    kind: Literal[FactKind.AFTER_CLASS] = FactKind.AFTER_CLASS


class PreCondition(MetadataFact):
    kind: Literal[FactKind.PRE_CONDITION] = FactKind.PRE_CONDITION


class PostCondition(MetadataFact):
    kind: Literal[FactKind.POST_CONDITION] = FactKind.POST_CONDITION


class BackupGlobals(MetadataFact):
    kind: Literal[FactKind.BACKUP_GLOBALS] = FactKind.BACKUP_GLOBALS
    enabled: Optional[bool] = None


class BackupStaticProperties(MetadataFact):
    kind: Literal[FactKind.BACKUP_STATIC_PROPERTIES] = FactKind.BACKUP_STATIC_PROPERTIES
    enabled: Optional[bool] = None


class PreserveGlobalState(MetadataFact):
    kind: Literal[FactKind.PRESERVE_GLOBAL_STATE] = FactKind.PRESERVE_GLOBAL_STATE
    enabled: Optional[bool] = None


class Requires(MetadataFact):
    """
    An environment requirement.

    ``name`` identifies the extension, setting or function. ``value`` holds the
    required version, OS pattern, OS family or setting value. A version
    requirement uses either ``value`` plus ``operator`` or ``constraint``;
    the operator may also lead the value, as in ``">=8.0"``.
    ``file`` and ``line`` point at the declaration for diagnostics.
    """

    kind: Literal[FactKind.REQUIRES] = FactKind.REQUIRES
    operand: RequirementOperand
    name: Optional[str] = None
    value: Optional[str] = None
    constraint: Optional[str] = None
    operator: Optional[str] = None
    file: Optional[str] = None
    line: Optional[int] = None

    @model_validator(mode="after")
    def check_payload(self) -> "Requires":
        operand = self.operand

        if operand == RequirementOperand.FUNCTION and not (self.name or self.value):
            raise ValueError("a function requirement needs a name")
        if operand in (RequirementOperand.SETTING, RequirementOperand.EXTENSION) and not self.name:
            raise ValueError(f"a {operand.value} requirement needs a name")
        if operand in (RequirementOperand.OS, RequirementOperand.OS_FAMILY) and not self.value:
            raise ValueError(f"an {operand.value} requirement needs a value")

        if operand not in VERSIONED_OPERANDS:
            return self

        if self.constraint:
            try:
                SpecifierSet(self.constraint)
            except InvalidSpecifier:
                raise ValueError(f'"{self.constraint}" is not a valid version constraint') from None
        elif self.value:
            inline_operator, version = self.version_and_operator()
            if inline_operator and self.operator:
                raise ValueError(f'"{self.value}" carries an operator and operator is also set')
            if not _is_valid_version(version):
                raise ValueError(f'"{self.value}" is not a valid version')

        return self

    def version_and_operator(self) -> Tuple[Optional[str], str]:
        """The required version and its operator, taken from ``value`` or ``operator``."""
        inline_operator, version = split_version_operator(self.value or "")
        return inline_operator or self.operator, version


class Depends(MetadataFact):
    """Execution-order dependency on another test, ``method`` or ``Class::method``."""

    kind: Literal[FactKind.DEPENDS] = FactKind.DEPENDS
    target: str
    clone_option: Optional[CloneOption] = None


class RunTestsInSeparateProcesses(MetadataFact):
    kind: Literal[FactKind.RUN_TESTS_IN_SEPARATE_PROCESSES] = FactKind.RUN_TESTS_IN_SEPARATE_PROCESSES


class RunInSeparateProcess(MetadataFact):
    kind: Literal[FactKind.RUN_IN_SEPARATE_PROCESS] = FactKind.RUN_IN_SEPARATE_PROCESS


class RunClassInSeparateProcess(MetadataFact):
    kind: Literal[FactKind.RUN_CLASS_IN_SEPARATE_PROCESS] = FactKind.RUN_CLASS_IN_SEPARATE_PROCESS


Fact = Annotated[
    Union[
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
    ],
    Field(discriminator="kind"),
]

_FACT_LIST_ADAPTER = TypeAdapter(List[Fact])


def parse_facts(data: List[Union[dict, MetadataFact]]) -> List[MetadataFact]:
    """
    Validate a list of facts given as models or plain dicts.

    Args:
        data: Facts, e.g. ``[{"kind": "group", "group_name": "slow"}]``

    Returns:
        The validated fact models
    """
    return _FACT_LIST_ADAPTER.validate_python(
        [fact.model_dump() if isinstance(fact, MetadataFact) else fact for fact in data]
    )
