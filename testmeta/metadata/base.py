"""
Base interface for metadata readers.

A reader turns the declarations on a class or method into a fact collection.
"""
import abc

from testmeta.core import MetadataCollection


class MetadataReader(abc.ABC):
    """Abstract source of metadata facts."""

    @abc.abstractmethod
    def for_class(self, class_name: str) -> MetadataCollection:
        """
        Get the facts declared on a class.

        Args:
            class_name: Qualified class name

        Returns:
            The class-level facts

        Raises:
            MetadataNotFoundError: If the class does not exist
        """
        pass

    @abc.abstractmethod
    def for_method(self, class_name: str, method_name: str) -> MetadataCollection:
        """
        Get the facts declared on a method.

        Args:
            class_name: Qualified class name
            method_name: Method name

        Returns:
            The method-level facts

        Raises:
            MetadataNotFoundError: If the class or method does not exist
        """
        pass
