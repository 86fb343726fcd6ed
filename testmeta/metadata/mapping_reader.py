"""
Metadata reader backed by a plain mapping, e.g. loaded from JSON.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
import logging

from testmeta.core import MetadataCollection, parse_facts
from testmeta.exceptions import MetadataNotFoundError
from testmeta.introspection import Introspector
from .base import MetadataReader


class MappingMetadataReader(MetadataReader):
    """
    Reads facts from a mapping of the form::

        {
            "app.tests.InvoiceTest": {
                "class": [{"kind": "group", "group_name": "billing"}],
                "methods": {"test_total": [{"kind": "coversNothing"}]}
            }
        }

    Facts may be fact models or dicts. Classes and methods that are absent from
    the mapping but exist according to ``introspector`` have no metadata.
    """

    def __init__(self, data: Optional[Dict[str, Dict[str, Any]]] = None,
                 introspector: Optional[Introspector] = None):
        self.introspector = introspector
        self.logger = logging.getLogger(__name__)

        self._classes: Dict[str, MetadataCollection] = {}
        self._methods: Dict[str, Dict[str, MetadataCollection]] = {}

        for class_name, entry in (data or {}).items():
            self._classes[class_name] = MetadataCollection(parse_facts(entry.get("class", [])))
            self._methods[class_name] = {
                method_name: MetadataCollection(parse_facts(facts))
                for method_name, facts in entry.get("methods", {}).items()
            }

    @classmethod
    def from_file(cls, path: Union[str, Path],
                  introspector: Optional[Introspector] = None) -> "MappingMetadataReader":
        """
        Load a reader from a JSON file.

        Args:
            path: Path to the JSON file
            introspector: Optional introspector for existence checks

        Returns:
            The reader
        """
        with open(path, "r") as f:
            data = json.load(f)
        return cls(data, introspector=introspector)

    def for_class(self, class_name: str) -> MetadataCollection:
        if class_name in self._classes:
            return self._classes[class_name]
        if self.introspector is not None and self.introspector.class_exists(class_name):
            return MetadataCollection()
        raise MetadataNotFoundError(f"Class {class_name} does not exist")

    def for_method(self, class_name: str, method_name: str) -> MetadataCollection:
        methods = self._methods.get(class_name, {})
        if method_name in methods:
            return methods[method_name]
        if self.introspector is not None and self.introspector.method_exists(class_name, method_name):
            return MetadataCollection()
        raise MetadataNotFoundError(f"Method {class_name}::{method_name} does not exist")
