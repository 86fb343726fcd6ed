"""
Hook method resolver: which methods run before and after tests.
"""
from typing import Dict, Iterable, Optional
import logging
import threading

from testmeta.core import HookKind, HookMethodTable, MetadataCollection
from testmeta.exceptions import IntrospectionError, MetadataNotFoundError
from testmeta.introspection import Introspector, MethodInfo
from testmeta.metadata import MetadataStore

# methods declared here are framework internals, never hooks
DEFAULT_FRAMEWORK_BASES = ("unittest.case.TestCase",)


class HookMethodResolver:
    """
    Builds the hook method table of a test class from its method inventory.

    Tables are cached per class name for the lifetime of the resolver.
    """

    def __init__(self, store: MetadataStore, introspector: Introspector,
                 framework_bases: Optional[Iterable[str]] = None):
        """
        Initialize the hook method resolver.

        Args:
            store: Metadata store to read method facts from
            introspector: Enumerates the methods of a class
            framework_bases: Qualified names of framework base classes whose
                own methods are skipped
        """
        self.store = store
        self.introspector = introspector
        self.framework_bases = frozenset(
            DEFAULT_FRAMEWORK_BASES if framework_bases is None else framework_bases
        )
        self.logger = logging.getLogger(__name__)

        self._cache: Dict[str, HookMethodTable] = {}
        self._lock = threading.Lock()

    def hook_methods(self, class_name: str) -> HookMethodTable:
        """
        Get the hook methods of a class.

        Args:
            class_name: Qualified test class name

        Returns:
            The hook table; the defaults when the class does not exist
        """
        if not self.introspector.class_exists(class_name):
            return HookMethodTable.with_defaults()

        with self._lock:
            cached = self._cache.get(class_name)
        if cached is not None:
            self.logger.debug(f"Hook methods of {class_name} served from cache")
            return cached.copy()

        table = self._scan(class_name)

        with self._lock:
            table = self._cache.setdefault(class_name, table)
        return table.copy()

    def is_test_method(self, class_name: str, method_name: str) -> bool:
        """
        Whether a method is a test: public, and named ``test*`` or marked ``Test``.

        Raises:
            MetadataNotFoundError: If the class or method does not exist
        """
        try:
            method = self.introspector.get_method(class_name, method_name)
        except IntrospectionError as e:
            raise MetadataNotFoundError(f"Method {class_name}::{method_name} does not exist") from e

        if not method.is_public():
            return False

        if method.name.startswith("test"):
            return True

        return self.store.for_method(class_name, method.name).is_test().is_not_empty()

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def _scan(self, class_name: str) -> HookMethodTable:
        table = HookMethodTable.with_defaults()

        try:
            for method in self.introspector.iter_methods(class_name):
                if method.declaring_class in self.framework_bases:
                    continue
                self._apply(table, method, self._method_metadata(class_name, method))
        except IntrospectionError as e:
            self.logger.warning(f"Stopped scanning {class_name} for hook methods: {e}")

        return table

    def _method_metadata(self, class_name: str, method: MethodInfo) -> MetadataCollection:
        try:
            return self.store.for_method(class_name, method.name)
        except MetadataNotFoundError:
            return MetadataCollection()

    def _apply(self, table: HookMethodTable, method: MethodInfo, metadata: MetadataCollection) -> None:
        if method.is_static:
            if metadata.is_before_class().is_not_empty():
                table.prepend(HookKind.BEFORE_CLASS, method.name)

            if metadata.is_after_class().is_not_empty():
                table.append(HookKind.AFTER_CLASS, method.name)

        if metadata.is_before().is_not_empty():
            table.prepend(HookKind.BEFORE, method.name)

        if metadata.is_pre_condition().is_not_empty():
            table.prepend(HookKind.PRE_CONDITION, method.name)

        if metadata.is_post_condition().is_not_empty():
            table.append(HookKind.POST_CONDITION, method.name)

        if metadata.is_after().is_not_empty():
            table.append(HookKind.AFTER, method.name)
