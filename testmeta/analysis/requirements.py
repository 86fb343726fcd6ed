"""
Requirement resolver: which environment requirements of a test are not met.
"""
from typing import Any, Dict, List, Optional
import logging
import re

from testmeta.core import MetadataCollection, RequirementOperand
from testmeta.environment import RuntimeEnvironment
from testmeta.introspection import Introspector
from testmeta.metadata import MetadataStore
from .versions import ComparisonOperator, VersionConstraint, VersionRequirement

OFFSET_KEY = "__offset"
OFFSET_FILE_KEY = "__file"


def merge_recursively(a: Dict[Any, Any], b: Dict[Any, Any]) -> Dict[Any, Any]:
    """
    Merge ``b`` into a copy of ``a``.

    On a key collision an integer key appends ``b``'s value under the next free
    integer key, two dicts merge recursively, two lists are concatenated, and
    anything else from ``b`` overwrites ``a``.
    """
    result = dict(a)

    for key, value in b.items():
        if key not in result:
            result[key] = value
        elif isinstance(key, int):
            int_keys = [k for k in result if isinstance(k, int)]
            result[max(int_keys) + 1] = value
        elif isinstance(value, dict) and isinstance(result[key], dict):
            result[key] = merge_recursively(result[key], value)
        elif isinstance(value, list) and isinstance(result[key], list):
            result[key] = result[key] + value
        else:
            result[key] = value

    return result


class RequirementResolver:
    """
    Checks ``Requires`` facts against a runtime environment.

    Every unmet requirement is reported; nothing short-circuits.
    """

    def __init__(self, store: MetadataStore, environment: RuntimeEnvironment,
                 introspector: Introspector):
        """
        Initialize the requirement resolver.

        Args:
            store: Metadata store to read facts from
            environment: Environment the requirements are checked against
            introspector: Used for function and method availability checks
        """
        self.store = store
        self.environment = environment
        self.introspector = introspector
        self.logger = logging.getLogger(__name__)

    def missing_requirements_for(self, class_name: str, method_name: str) -> List[str]:
        for_class, for_method = self.store.metadata_for_class_and_method(class_name, method_name)
        return self.missing_requirements(for_class, for_method)

    def requirements_from(self, metadata: MetadataCollection) -> Dict[str, Any]:
        """
        Fold ``Requires`` facts into a requirements mapping.

        Args:
            metadata: Facts of one class or one method

        Returns:
            Mapping with the keys ``python``, ``python_constraint``, ``framework``,
            ``framework_constraint``, ``os_family``, ``os``, ``functions``,
            ``settings``, ``extensions``, ``extension_versions`` and ``__offset``,
            each present only when declared
        """
        required: Dict[str, Any] = {}
        offsets: Dict[str, Any] = {}

        for fact in metadata.is_requires():
            operand = fact.operand

            if operand in (RequirementOperand.PYTHON, RequirementOperand.FRAMEWORK):
                key = operand.value
                if fact.constraint:
                    key = f"{key}_constraint"
                    required[key] = VersionConstraint(fact.constraint)
                elif fact.value:
                    operator, version = fact.version_and_operator()
                    required[key] = VersionRequirement(
                        operand=key,
                        version=version,
                        operator=ComparisonOperator.parse(operator),
                        line=fact.line
                    )
                else:
                    self.logger.warning(f"Ignoring {key} requirement without a version")
                    continue
            elif operand == RequirementOperand.OS_FAMILY:
                key = "os_family"
                required[key] = fact.value
            elif operand == RequirementOperand.OS:
                key = "os"
                required[key] = fact.value
            elif operand == RequirementOperand.FUNCTION:
                name = fact.name or fact.value
                key = f"function_{name}"
                required.setdefault("functions", []).append(name)
            elif operand == RequirementOperand.SETTING:
                key = f"__setting_{fact.name}"
                required.setdefault("settings", {})[fact.name] = fact.value or ""
            else:
                key = f"extension_{fact.name}"
                if fact.constraint:
                    required.setdefault("extension_versions", {})[fact.name] = VersionConstraint(fact.constraint)
                elif fact.value:
                    operator, version = fact.version_and_operator()
                    required.setdefault("extension_versions", {})[fact.name] = VersionRequirement(
                        operand=fact.name,
                        version=version,
                        operator=ComparisonOperator.parse(operator),
                        line=fact.line
                    )
                else:
                    required.setdefault("extensions", []).append(fact.name)

            if fact.file:
                offsets[OFFSET_FILE_KEY] = fact.file
            if fact.line is not None:
                offsets[key] = fact.line

        if offsets:
            required[OFFSET_KEY] = offsets

        return required

    def missing_requirements(self, class_metadata: MetadataCollection,
                             method_metadata: MetadataCollection) -> List[str]:
        """
        List the requirements the environment does not meet.

        Method requirements override class requirements. When anything is
        missing and the declarations carry a source location, the list starts
        with ``__OFFSET_LINE=<line>`` and ``__OFFSET_FILE=<file>``.

        Args:
            class_metadata: Facts declared on the test class
            method_metadata: Facts declared on the test method

        Returns:
            Human-readable messages, empty when the test can run
        """
        required = merge_recursively(
            self.requirements_from(class_metadata),
            self.requirements_from(method_metadata)
        )

        missing: List[str] = []
        hint: Optional[str] = None
        env = self.environment

        for label, key in (("Python", "python"), ("Framework", "framework")):
            actual = env.python_version if key == "python" else env.framework_version

            if required.get(key):
                requirement = required[key]
                if not requirement.is_satisfied_by(actual):
                    missing.append(f"{label} {requirement.operator.value} {requirement.version} is required.")
                    hint = hint or key
            elif required.get(f"{key}_constraint"):
                constraint = required[f"{key}_constraint"]
                if not constraint.complies(actual):
                    missing.append(
                        f"{label} version does not match the required constraint {constraint.as_string()}."
                    )
                    hint = hint or f"{key}_constraint"

        if required.get("os_family") and required["os_family"] != env.os_family:
            missing.append(f"Operating system {required['os_family']} is required.")
            hint = hint or "os_family"

        if required.get("os"):
            escaped = required["os"].replace("/", "\\/")
            if not self._os_matches(escaped):
                missing.append(f"Operating system matching /{escaped}/i is required.")
                hint = hint or "os"

        for function in required.get("functions", []):
            if not self._function_available(function):
                missing.append(f"Function {function} is required.")
                hint = hint or f"function_{function}"

        for setting, value in required.get("settings", {}).items():
            if env.setting(setting) != value:
                missing.append(f'Setting "{setting}" must be "{value}".')
                hint = hint or f"__setting_{setting}"

        extension_versions = required.get("extension_versions", {})

        for extension in required.get("extensions", []):
            if extension in extension_versions:
                continue
            if not env.extension_loaded(extension):
                missing.append(f"Extension {extension} is required.")
                hint = hint or f"extension_{extension}"

        for extension, requirement in extension_versions.items():
            actual = env.extension_version(extension)

            if isinstance(requirement, VersionConstraint):
                satisfied = actual is not None and requirement.complies(actual)
                expected = requirement.as_string()
            else:
                satisfied = requirement.is_satisfied_by(actual)
                expected = f"{requirement.operator.value} {requirement.version}"

            if not satisfied:
                missing.append(f"Extension {extension} {expected} is required.")
                hint = hint or f"extension_{extension}"

        if hint and OFFSET_KEY in required:
            offsets = required[OFFSET_KEY]
            missing.insert(0, f"__OFFSET_FILE={offsets.get(OFFSET_FILE_KEY, '')}")
            missing.insert(0, f"__OFFSET_LINE={offsets.get(hint, 1)}")

        if missing:
            self.logger.debug(f"Missing requirements: {missing}")

        return missing

    def _os_matches(self, pattern: str) -> bool:
        try:
            return re.search(pattern, self.environment.os_name, re.IGNORECASE) is not None
        except re.error:
            self.logger.warning(f"Invalid operating system pattern /{pattern}/i")
            return False

    def _function_available(self, function: str) -> bool:
        pieces = function.split("::")
        if (len(pieces) == 2 and self.introspector.class_exists(pieces[0])
                and self.introspector.method_exists(pieces[0], pieces[1])):
            return True
        return self.introspector.function_exists(function)
