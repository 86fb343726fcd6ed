"""
Read-through cache over a metadata reader.
"""
from typing import Dict, Optional, Tuple
import logging
import threading

from testmeta.core import MetadataCollection
from testmeta.introspection import Introspector
from .base import MetadataReader


class MetadataStore:
    """
    Caches the fact collections of classes and methods by name.

    Reader failures are not cached, so a class that becomes available later is
    picked up on the next lookup.
    """

    def __init__(self, reader: MetadataReader, introspector: Introspector):
        """
        Initialize the store.

        Args:
            reader: Source of the facts
            introspector: Used to probe class and method existence
        """
        self.reader = reader
        self.introspector = introspector
        self.logger = logging.getLogger(__name__)

        self._classes: Dict[str, MetadataCollection] = {}
        self._methods: Dict[Tuple[str, str], MetadataCollection] = {}
        self._lock = threading.Lock()

    def for_class(self, class_name: str) -> MetadataCollection:
        """Facts declared on a class; raises ``MetadataNotFoundError`` for unknown classes."""
        with self._lock:
            cached = self._classes.get(class_name)
        if cached is not None:
            return cached

        metadata = self.reader.for_class(class_name)
        with self._lock:
            return self._classes.setdefault(class_name, metadata)

    def for_method(self, class_name: str, method_name: str) -> MetadataCollection:
        """Facts declared on a method; raises ``MetadataNotFoundError`` for unknown methods."""
        key = (class_name, method_name)
        with self._lock:
            cached = self._methods.get(key)
        if cached is not None:
            return cached

        metadata = self.reader.for_method(class_name, method_name)
        with self._lock:
            return self._methods.setdefault(key, metadata)

    def metadata_for_class_and_method(
        self, class_name: str, method_name: Optional[str]
    ) -> Tuple[MetadataCollection, MetadataCollection]:
        """
        Get class and method facts, treating missing symbols as having no metadata.

        Args:
            class_name: Qualified class name
            method_name: Method name, or None for class-level metadata only

        Returns:
            Tuple of (class facts, method facts)
        """
        for_class = MetadataCollection()
        for_method = MetadataCollection()

        if self.introspector.class_exists(class_name):
            for_class = self.for_class(class_name)

            if method_name and self.introspector.method_exists(class_name, method_name):
                for_method = self.for_method(class_name, method_name)
        else:
            self.logger.debug(f"Class {class_name} does not exist, using empty metadata")

        return for_class, for_method

    def clear(self) -> None:
        with self._lock:
            self._classes.clear()
            self._methods.clear()
