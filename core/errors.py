"""
Exceptions raised while reading installed programs from the registry.
"""

from typing import Optional


class RegistryError(OSError):
    """
    A registry operation failed in a way that cannot be absorbed.

    Attributes:
        error_code: Windows error code reported by the system, if known
    """

    def __init__(self, message: str, error_code: Optional[int] = None):
        super().__init__(message)
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code is None:
            return self.args[0]
        return f"{self.args[0]} (error {self.error_code})"


class UninstallKeyError(RegistryError):
    """The Uninstall subtree of a hive/view could not be opened or listed."""


class LastWriteTimeError(RegistryError):
    """RegQueryInfoKeyW failed while reading a key's last write time."""


class ProgramDisposedError(ValueError):
    """A field was read from a ProgramInfo after its registry key was released."""

    def __init__(self, name: str = "ProgramInfo"):
        super().__init__(f"Cannot access a released {name}.")
