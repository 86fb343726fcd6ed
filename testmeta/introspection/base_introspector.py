"""
Base introspection interface for TestMeta.

Resolvers never touch Python objects directly; they ask an introspector.
"""
from enum import Enum
from typing import Any, Iterator, List
import abc

from pydantic import BaseModel, ConfigDict

from testmeta.exceptions import IntrospectionError


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class MethodInfo(BaseModel):
    """A method declared on, or inherited by, a class."""

    model_config = ConfigDict(frozen=True)

    name: str
    declaring_class: str
    is_static: bool = False
    visibility: Visibility = Visibility.PUBLIC

    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC


class Introspector(abc.ABC):
    """Abstract class-introspection capability."""

    @abc.abstractmethod
    def get_class(self, class_name: str) -> type:
        """
        Look up a class by its qualified name.

        Raises:
            IntrospectionError: If the class does not exist
        """
        pass

    @abc.abstractmethod
    def get_function(self, function_name: str) -> Any:
        """
        Look up a free function by its qualified name.

        Raises:
            IntrospectionError: If the function does not exist
        """
        pass

    @abc.abstractmethod
    def iter_methods(self, class_name: str) -> Iterator[MethodInfo]:
        """
        Yield the declared and inherited methods of a class.

        Methods of the class itself come first, followed by inherited ones in
        method resolution order. A failure part way through raises
        ``IntrospectionError`` after the methods yielded so far.
        """
        pass

    @abc.abstractmethod
    def method_exists(self, class_name: str, method_name: str) -> bool:
        pass

    @abc.abstractmethod
    def is_interface(self, name: str) -> bool:
        """Whether ``name`` is a class without executable code of its own."""
        pass

    def class_exists(self, class_name: str) -> bool:
        try:
            self.get_class(class_name)
        except IntrospectionError:
            return False
        return True

    def function_exists(self, function_name: str) -> bool:
        try:
            self.get_function(function_name)
        except IntrospectionError:
            return False
        return True

    def methods(self, class_name: str) -> List[MethodInfo]:
        return list(self.iter_methods(class_name))

    def get_method(self, class_name: str, method_name: str) -> MethodInfo:
        """
        Look up one method of a class.

        Raises:
            IntrospectionError: If the class or method does not exist
        """
        for method in self.iter_methods(class_name):
            if method.name == method_name:
                return method
        raise IntrospectionError(f"Method {class_name}::{method_name} does not exist")
