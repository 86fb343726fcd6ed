"""
Metadata reader for facts attached to Python objects with ``@annotate``.
"""
from typing import Any, Callable
import inspect

from testmeta.core import MetadataCollection, MetadataFact
from testmeta.exceptions import IntrospectionError, MetadataNotFoundError
from testmeta.introspection import Introspector
from testmeta.introspection.python_introspector import is_method_like, unwrap_method
from .base import MetadataReader

METADATA_ATTRIBUTE = "__testmeta__"


def annotate(*facts: MetadataFact) -> Callable[[Any], Any]:
    """
    Attach facts to a class, function, staticmethod or classmethod.

    Stacked decorators keep top-to-bottom declaration order.
    """
    def decorator(obj: Any) -> Any:
        target = unwrap_method(obj)
        existing = vars(target).get(METADATA_ATTRIBUTE, ())
        setattr(target, METADATA_ATTRIBUTE, tuple(facts) + tuple(existing))
        return obj

    return decorator


class AttributeMetadataReader(MetadataReader):
    """Reads facts stored on classes and functions under ``__testmeta__``."""

    def __init__(self, introspector: Introspector):
        self.introspector = introspector

    def for_class(self, class_name: str) -> MetadataCollection:
        cls = self._get_class(class_name)
        # class-level facts are not inherited
        return MetadataCollection(vars(cls).get(METADATA_ATTRIBUTE, ()))

    def for_method(self, class_name: str, method_name: str) -> MetadataCollection:
        cls = self._get_class(class_name)
        attr = inspect.getattr_static(cls, method_name, None)
        if not is_method_like(attr):
            raise MetadataNotFoundError(f"Method {class_name}::{method_name} does not exist")
        return MetadataCollection(getattr(unwrap_method(attr), METADATA_ATTRIBUTE, ()))

    def _get_class(self, class_name: str) -> type:
        try:
            return self.introspector.get_class(class_name)
        except IntrospectionError as e:
            raise MetadataNotFoundError(f"Class {class_name} does not exist") from e
