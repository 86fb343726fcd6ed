"""
Class introspection and code-unit mapping.
"""

from .base_introspector import Introspector, MethodInfo, Visibility
from .python_introspector import PythonIntrospector
from .code_unit_mapper import CodeUnitMapper, InspectCodeUnitMapper, LineRanges

__all__ = [
    "Introspector",
    "MethodInfo",
    "Visibility",
    "PythonIntrospector",
    "CodeUnitMapper",
    "InspectCodeUnitMapper",
    "LineRanges"
]
