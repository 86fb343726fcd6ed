"""
Snapshot of the runtime environment that requirements are checked against.
"""
from typing import Any, Dict, Optional
import importlib.metadata
import importlib.util
import os
import platform

from pydantic import BaseModel, ConfigDict, Field


def os_family(system: str) -> str:
    """Map ``platform.system()`` to an OS family name."""
    if system == "Windows" or system.startswith(("CYGWIN", "MSYS", "MINGW")):
        return "Windows"
    if system == "Darwin":
        return "Darwin"
    if system.endswith("BSD") or system == "DragonFly":
        return "BSD"
    if system == "SunOS":
        return "Solaris"
    if system == "Linux":
        return "Linux"
    return "Unknown"


def _default_framework_version() -> str:
    from testmeta import __version__
    return __version__


class RuntimeEnvironment(BaseModel):
    """
    The interpreter, framework, OS and settings a test would run under.

    ``extensions`` pins installed packages and their versions (``None`` when the
    version is unknown). When unset, lookups go to ``importlib``.
    """

    model_config = ConfigDict(frozen=True)

    python_version: str
    framework_version: str
    os_name: str
    os_family: str
    settings: Dict[str, str] = Field(default_factory=dict)
    extensions: Optional[Dict[str, Optional[str]]] = None

    @classmethod
    def detect(cls, **overrides: Any) -> "RuntimeEnvironment":
        """
        Capture the current process environment.

        Args:
            **overrides: Field values that replace the detected ones

        Returns:
            The environment snapshot
        """
        system = platform.system()
        values: Dict[str, Any] = {
            "python_version": platform.python_version(),
            "framework_version": _default_framework_version(),
            "os_name": system,
            "os_family": os_family(system),
            "settings": dict(os.environ),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def setting(self, name: str) -> Optional[str]:
        return self.settings.get(name)

    def extension_loaded(self, name: str) -> bool:
        if self.extensions is not None:
            return name in self.extensions

        if self.extension_version(name) is not None:
            return True
        try:
            return importlib.util.find_spec(name) is not None
        except (ImportError, ValueError):
            return False

    def extension_version(self, name: str) -> Optional[str]:
        if self.extensions is not None:
            return self.extensions.get(name)

        try:
            return importlib.metadata.version(name)
        except importlib.metadata.PackageNotFoundError:
            return None
