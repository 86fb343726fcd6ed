"""
Decisions handed to the test runner: hook tables, sizes, dependencies, settings.
"""
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .facts import CloneOption


class HookKind(str, Enum):
    BEFORE_CLASS = "beforeClass"
    BEFORE = "before"
    PRE_CONDITION = "preCondition"
    POST_CONDITION = "postCondition"
    AFTER = "after"
    AFTER_CLASS = "afterClass"


DEFAULT_HOOK_METHODS: Dict[HookKind, str] = {
    HookKind.BEFORE_CLASS: "setUpClass",
    HookKind.BEFORE: "setUp",
    HookKind.PRE_CONDITION: "assertPreConditions",
    HookKind.POST_CONDITION: "assertPostConditions",
    HookKind.AFTER: "tearDown",
    HookKind.AFTER_CLASS: "tearDownClass",
}


class HookMethodTable:
    """
    Ordered hook method names per lifecycle point.

    Every list starts out holding the conventional ``unittest`` method name.
    """

    def __init__(self, methods: Optional[Dict[HookKind, List[str]]] = None):
        if methods is None:
            methods = {kind: [name] for kind, name in DEFAULT_HOOK_METHODS.items()}
        self._methods = {kind: list(methods.get(kind, [])) for kind in HookKind}

    @classmethod
    def with_defaults(cls) -> "HookMethodTable":
        return cls()

    def prepend(self, kind: HookKind, method_name: str) -> None:
        self._methods[kind].insert(0, method_name)

    def append(self, kind: HookKind, method_name: str) -> None:
        self._methods[kind].append(method_name)

    def __getitem__(self, kind: HookKind) -> List[str]:
        return list(self._methods[HookKind(kind)])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HookMethodTable):
            return NotImplemented
        return self._methods == other._methods

    def __repr__(self) -> str:
        return f"HookMethodTable({self.as_dict()!r})"

    def copy(self) -> "HookMethodTable":
        return HookMethodTable(self._methods)

    def as_dict(self) -> Dict[str, List[str]]:
        return {kind.value: list(names) for kind, names in self._methods.items()}


class TestSize(str, Enum):
    """Size classification derived from the ``small``/``medium``/``large`` groups."""

    __test__ = False

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    UNKNOWN = "unknown"


class BackupSettings(BaseModel):
    """``None`` means unset; the runner applies its own default."""

    model_config = ConfigDict(frozen=True)

    backup_globals: Optional[bool] = None
    backup_static_properties: Optional[bool] = None


class ExecutionOrderDependency(BaseModel):
    """A test that must run, and pass, before the dependent test."""

    model_config = ConfigDict(frozen=True)

    class_name: str
    method_name: str
    clone_option: Optional[CloneOption] = None

    @classmethod
    def from_depends(cls, class_name: str, target: str,
                     clone_option: Optional[CloneOption] = None) -> Optional["ExecutionOrderDependency"]:
        """
        Build a dependency from a ``Depends`` target.

        Targets without ``::`` refer to a method of ``class_name``. ``Class::class``
        depends on every test of ``Class``.

        Args:
            class_name: The class declaring the dependency
            target: The declared target
            clone_option: How the dependency's return value is passed on

        Returns:
            The dependency, or None for an empty target
        """
        target = target.strip()
        if not target:
            return None

        if "::" not in target:
            target = f"{class_name}::{target}"

        dependency_class, _, method_name = target.partition("::")
        return cls(
            class_name=dependency_class,
            method_name=method_name or "class",
            clone_option=clone_option
        )

    def targets_class(self) -> bool:
        return self.method_name == "class"

    def target(self) -> str:
        if self.targets_class():
            return self.class_name
        return f"{self.class_name}::{self.method_name}"

    def uses_deep_clone(self) -> bool:
        return self.clone_option == CloneOption.DEEP

    def uses_shallow_clone(self) -> bool:
        return self.clone_option == CloneOption.SHALLOW

    def __str__(self) -> str:
        return self.target()
