"""
Factory module for metadata reader implementations.
"""
from typing import Any

from testmeta.introspection import Introspector
from .base import MetadataReader
from .attribute_reader import AttributeMetadataReader
from .mapping_reader import MappingMetadataReader


def get_metadata_reader(reader_type: str, introspector: Introspector, **kwargs: Any) -> MetadataReader:
    """
    Factory function to get the appropriate metadata reader.

    Args:
        reader_type: Type of reader ('attribute', 'mapping', 'json')
        introspector: Introspector used for existence checks
        **kwargs: Additional arguments to pass to the reader

    Returns:
        An instance of the appropriate reader
    """
    if reader_type == "attribute":
        return AttributeMetadataReader(introspector)
    if reader_type == "mapping":
        return MappingMetadataReader(kwargs.get("data"), introspector=introspector)
    if reader_type == "json":
        if "path" not in kwargs:
            raise ValueError("The json metadata reader requires a 'path'")
        return MappingMetadataReader.from_file(kwargs["path"], introspector=introspector)

    raise ValueError(f"Unsupported reader type: {reader_type}. Supported types: ['attribute', 'mapping', 'json']")
