"""
Introspection of live Python classes and functions.
"""
from typing import Any, Callable, Dict, Iterable, Iterator, Optional
import importlib
import inspect
import logging

from testmeta.exceptions import IntrospectionError
from .base_introspector import Introspector, MethodInfo, Visibility


def unwrap_method(attr: Any) -> Any:
    """Return the plain function behind a ``staticmethod``/``classmethod``."""
    if isinstance(attr, (staticmethod, classmethod)):
        return attr.__func__
    return attr


def is_method_like(attr: Any) -> bool:
    return isinstance(attr, (staticmethod, classmethod)) or inspect.isfunction(attr)


class PythonIntrospector(Introspector):
    """
    Introspector backed by the running interpreter.

    Classes and functions can be registered under explicit names. Any other
    dotted name is looked up by importing its module, unless ``import_modules``
    is disabled.
    """

    def __init__(self, classes: Optional[Iterable[type]] = None,
                 functions: Optional[Iterable[Callable]] = None,
                 import_modules: bool = True):
        """
        Initialize the introspector.

        Args:
            classes: Classes to register under their default names
            functions: Functions to register under their default names
            import_modules: Whether unregistered names may be imported
        """
        self.import_modules = import_modules
        self.logger = logging.getLogger(__name__)

        self._classes: Dict[str, type] = {}
        self._class_names: Dict[int, str] = {}
        self._functions: Dict[str, Callable] = {}

        for cls in classes or []:
            self.register_class(cls)
        for func in functions or []:
            self.register_function(func)

    def register_class(self, cls: type, name: Optional[str] = None) -> str:
        """
        Make a class known under a qualified name.

        Args:
            cls: The class
            name: Name to register, defaults to ``module.QualifiedName``

        Returns:
            The registered name
        """
        name = name or self.default_name(cls)
        self._classes[name] = cls
        self._class_names[id(cls)] = name
        return name

    def register_function(self, func: Callable, name: Optional[str] = None) -> str:
        name = name or self.default_name(func)
        self._functions[name] = func
        return name

    @staticmethod
    def default_name(obj: Any) -> str:
        return f"{obj.__module__}.{obj.__qualname__}"

    def name_of(self, cls: type) -> str:
        """Qualified name of a class, preferring its registered name."""
        return self._class_names.get(id(cls), self.default_name(cls))

    def get_class(self, class_name: str) -> type:
        if class_name in self._classes:
            return self._classes[class_name]

        obj = self._import_object(class_name)
        if not inspect.isclass(obj):
            raise IntrospectionError(f"{class_name} is not a class")
        return obj

    def get_function(self, function_name: str) -> Any:
        if function_name in self._functions:
            return self._functions[function_name]

        obj = self._import_object(function_name)
        if inspect.isclass(obj) or not inspect.isroutine(obj):
            raise IntrospectionError(f"{function_name} is not a function")
        return obj

    def method_exists(self, class_name: str, method_name: str) -> bool:
        try:
            cls = self.get_class(class_name)
        except IntrospectionError:
            return False
        return is_method_like(inspect.getattr_static(cls, method_name, None))

    def iter_methods(self, class_name: str) -> Iterator[MethodInfo]:
        cls = self.get_class(class_name)
        seen = set()

        try:
            for klass in inspect.getmro(cls):
                if klass is object:
                    continue

                declaring_class = self.name_of(klass)
                for name, attr in list(vars(klass).items()):
                    if name in seen or not is_method_like(attr):
                        continue
                    seen.add(name)

                    yield MethodInfo(
                        name=name,
                        declaring_class=declaring_class,
                        is_static=isinstance(attr, (staticmethod, classmethod)),
                        visibility=self._visibility(klass, name)
                    )
        except (AttributeError, TypeError) as e:
            raise IntrospectionError(f"Cannot introspect methods of {class_name}: {e}") from e

    def is_interface(self, name: str) -> bool:
        try:
            cls = self.get_class(name)
        except IntrospectionError:
            return False

        if getattr(cls, "_is_protocol", False):
            return True

        if not inspect.isabstract(cls):
            return False

        own_methods = [
            unwrap_method(attr) for attr_name, attr in vars(cls).items()
            if is_method_like(attr) and not attr_name.startswith("__")
        ]
        return bool(own_methods) and all(
            getattr(method, "__isabstractmethod__", False) for method in own_methods
        )

    def _visibility(self, klass: type, name: str) -> Visibility:
        mangled_prefix = f"_{klass.__name__.lstrip('_')}__"
        if name.startswith(mangled_prefix) and not name.endswith("__"):
            return Visibility.PRIVATE
        if name.startswith("__") and name.endswith("__"):
            return Visibility.PUBLIC
        if name.startswith("_"):
            return Visibility.PROTECTED
        return Visibility.PUBLIC

    def _import_object(self, name: str) -> Any:
        if not self.import_modules:
            raise IntrospectionError(f"{name} is not registered")

        parts = name.split(".")
        for index in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:index])
            try:
                obj = importlib.import_module(module_name)
            except (ImportError, ValueError):
                continue

            try:
                for attr in parts[index:]:
                    obj = getattr(obj, attr)
            except AttributeError:
                break

            self.logger.debug(f"Resolved {name} by importing {module_name}")
            return obj

        raise IntrospectionError(f"{name} cannot be found")
