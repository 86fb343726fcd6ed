"""
Exception types raised by TestMeta.
"""


class TestMetadataError(Exception):
    """Base class for all TestMeta errors."""

    # keep pytest from collecting this as a test class
    __test__ = False


class CodeCoverageError(TestMetadataError):
    """Coverage or uses metadata could not be resolved."""


class InvalidCoversTargetError(CodeCoverageError):
    """A covers/uses target is malformed, missing, or an interface."""


class AmbiguousDefaultClassError(CodeCoverageError):
    """More than one default-class shortcut was declared in one scope."""


class MetadataNotFoundError(TestMetadataError):
    """No metadata exists because the class or method does not exist."""


class InvalidCodeUnitError(TestMetadataError):
    """A code unit reference could not be resolved."""


class IntrospectionError(TestMetadataError):
    """A class or its members could not be introspected."""


class InvalidVersionError(TestMetadataError, ValueError):
    """A required version or version constraint cannot be parsed."""


class InvalidVersionOperatorError(TestMetadataError, ValueError):
    """A version comparison operator is not supported."""
