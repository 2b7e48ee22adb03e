"""
Read-only access to the Windows Registry.

Wraps winreg handles so that hive/view routing, value lookups with defaults
and key metadata go through one small surface. Anything that implements the
same methods as RegistryKey can stand in for the real registry.
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, List, Optional

from core import native

if sys.platform == "win32":
    import winreg

logger = logging.getLogger(__name__)

KEY_READ = 0x20019


class RegistryHive(Enum):
    """Top-level registry partitions that hold Uninstall entries."""

    CURRENT_USER = "HKEY_CURRENT_USER"
    LOCAL_MACHINE = "HKEY_LOCAL_MACHINE"


class RegistryView(IntEnum):
    """Registry view, expressed as the WOW64 access flag it maps to."""

    DEFAULT = 0
    REGISTRY64 = 0x0100  # KEY_WOW64_64KEY
    REGISTRY32 = 0x0200  # KEY_WOW64_32KEY


@dataclass(frozen=True)
class RegistryLocation:
    """A hive/view pair that can be enumerated."""

    hive: RegistryHive
    view: RegistryView = RegistryView.DEFAULT

    @property
    def label(self) -> str:
        """Short label for display: user, x64 or x86."""
        if self.hive is RegistryHive.CURRENT_USER:
            return "user"
        if self.view is RegistryView.REGISTRY32:
            return "x86"
        return "x64"

    def __str__(self) -> str:
        if self.view is RegistryView.DEFAULT:
            return self.hive.value
        return f"{self.hive.value} ({self.view.name})"


class RegistryKey:
    """
    An open, read-only registry key.

    Keys opened below this one inherit its view. The handle is released by
    close(), which is safe to call more than once.
    """

    def __init__(self, handle, name: str, view: RegistryView = RegistryView.DEFAULT, owns_handle: bool = True):
        self._handle = handle
        self.name = name
        self.view = view
        self._owns_handle = owns_handle

    @property
    def handle(self):
        if self._handle is None:
            raise ValueError(f"Registry key '{self.name}' is closed")
        return self._handle

    @property
    def closed(self) -> bool:
        return self._handle is None

    def open_subkey(self, path: str) -> "RegistryKey":
        """
        Open a subkey for reading.

        Raises:
            OSError: If the key does not exist or cannot be opened
        """
        handle = winreg.OpenKey(self.handle, path, 0, KEY_READ | self.view)
        return RegistryKey(handle, f"{self.name}\\{path}", self.view)

    def get_subkey_names(self) -> List[str]:
        """
        Return the names of the immediate subkeys.

        Enumeration stops at the first index EnumKey cannot read, so keys
        removed while listing only shorten the result.
        """
        handle = self.handle
        names = []
        index = 0
        while True:
            try:
                names.append(winreg.EnumKey(handle, index))
            except OSError:
                # No more subkeys
                break
            index += 1
        return names

    def get_value(self, value_name: str, default: Any = None) -> Any:
        """
        Read a value from this key.

        REG_EXPAND_SZ data is returned with environment variables expanded.

        Args:
            value_name: Name of the value to read
            default: Returned when the value does not exist or cannot be read

        Returns:
            The value data, or default
        """
        try:
            value, value_type = winreg.QueryValueEx(self.handle, value_name)
        except FileNotFoundError:
            return default
        except OSError as e:
            logger.debug(f"Could not read value '{value_name}' from {self.name}: {e}")
            return default

        if value_type == winreg.REG_EXPAND_SZ and isinstance(value, str):
            value = winreg.ExpandEnvironmentStrings(value)
        return value

    def last_write_time(self):
        """Return the last time this key was written (see core.native)."""
        return native.get_last_write_time(self.handle, self.name)

    def close(self) -> None:
        if self._handle is not None:
            if self._owns_handle:
                winreg.CloseKey(self._handle)
            self._handle = None

    def __enter__(self) -> "RegistryKey":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"RegistryKey({self.name!r}, {state})"


def open_base_key(hive: RegistryHive, view: RegistryView = RegistryView.DEFAULT) -> RegistryKey:
    """
    Open the root of a hive under a registry view.

    Predefined hive handles are never closed, so closing the returned key
    only detaches it.
    """
    return RegistryKey(getattr(winreg, hive.value), hive.value, view, owns_handle=False)


def as_string(value: Any) -> Optional[str]:
    """Coerce registry data to a string; non-string data yields None."""
    if isinstance(value, str):
        return value
    return None


def as_int(value: Any) -> Optional[int]:
    """
    Coerce registry data to an integer.

    DWORD/QWORD data is returned as is and decimal strings are parsed.
    Anything else yields None.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.isdecimal():
            return int(text)
    return None
