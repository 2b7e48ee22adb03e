"""
System information utilities for Windows.
Provides functions to detect the OS architecture used to pick registry views.
"""

import platform
import sys
from typing import Any, Dict


def get_windows_version() -> str:
    """
    Get Windows version string.

    Returns:
        Windows version (e.g., "Windows 10", "Windows 11"), or the platform
        name when not running on Windows
    """
    if sys.platform != "win32":
        return platform.system()

    version_info = sys.getwindowsversion()

    # Windows 11 has the same version number as Windows 10 (10.0)
    # but build number >= 22000
    if version_info.major == 10 and version_info.minor == 0:
        if version_info.build >= 22000:
            return "Windows 11"
        return "Windows 10"

    return f"Windows {version_info.major}.{version_info.minor} (Build {version_info.build})"


def get_architecture() -> str:
    """
    Get operating system architecture.

    Returns:
        Architecture string ("x64" or "x86")
    """
    machine = platform.machine().lower()
    if "64" in machine:
        return "x64"
    return "x86"


def is_64bit() -> bool:
    """
    Check if the operating system is 64-bit.

    A 64-bit OS has separate 32-bit and 64-bit views of HKEY_LOCAL_MACHINE.

    Returns:
        True if 64-bit, False if 32-bit
    """
    return get_architecture() == "x64"


def get_python_architecture() -> str:
    """
    Get the architecture of the Python interpreter.

    Returns:
        "64-bit" or "32-bit"
    """
    return "64-bit" if sys.maxsize > 2**32 else "32-bit"


def get_system_info() -> Dict[str, Any]:
    """
    Get the system information included in exports.

    Returns:
        Dictionary with system information
    """
    return {
        "os": get_windows_version(),
        "architecture": get_architecture(),
        "is_64bit": is_64bit(),
        "python_version": platform.python_version(),
        "python_architecture": get_python_architecture(),
        "computer_name": platform.node(),
    }
