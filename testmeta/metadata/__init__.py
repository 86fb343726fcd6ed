"""
Metadata readers and the metadata store.
"""

from .base import MetadataReader
from .attribute_reader import AttributeMetadataReader, METADATA_ATTRIBUTE, annotate
from .mapping_reader import MappingMetadataReader
from .store import MetadataStore
from .factory import get_metadata_reader

__all__ = [
    "MetadataReader",
    "AttributeMetadataReader",
    "METADATA_ATTRIBUTE",
    "annotate",
    "MappingMetadataReader",
    "MetadataStore",
    "get_metadata_reader"
]
