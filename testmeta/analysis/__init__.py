"""
Resolvers that turn test metadata into runner decisions.
"""

from .versions import (
    ComparisonOperator,
    VersionConstraint,
    VersionRequirement,
    compare,
    sanitize_version
)
from .requirements import RequirementResolver, merge_recursively
from .coverage import CoverageResolver
from .grouping import GroupingResolver, canonicalize_name
from .hooks import HookMethodResolver, DEFAULT_FRAMEWORK_BASES

__all__ = [
    "ComparisonOperator",
    "VersionConstraint",
    "VersionRequirement",
    "compare",
    "sanitize_version",
    "RequirementResolver",
    "merge_recursively",
    "CoverageResolver",
    "GroupingResolver",
    "canonicalize_name",
    "HookMethodResolver",
    "DEFAULT_FRAMEWORK_BASES"
]
