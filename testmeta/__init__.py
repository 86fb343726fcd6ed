"""
TestMeta - metadata resolution for unit-test classes and methods.
"""

__version__ = "0.1.0"

from .engine import TestMetadataEngine

__all__ = [
    "__version__",
    "TestMetadataEngine"
]
