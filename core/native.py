"""
Native registry metadata access.

winreg has no way to ask for only the last write time of a key, so the call
to RegQueryInfoKeyW is made directly through ctypes with every other output
left NULL.
"""

import ctypes
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil import tz

from core.errors import LastWriteTimeError

ERROR_SUCCESS = 0

# FILETIME counts 100-nanosecond intervals since 1601-01-01 UTC
FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)


class FILETIME(ctypes.Structure):
    _fields_ = [
        ("dwLowDateTime", ctypes.c_uint32),
        ("dwHighDateTime", ctypes.c_uint32),
    ]

    def to_datetime(self) -> datetime:
        return filetime_to_datetime(self.dwHighDateTime, self.dwLowDateTime)


def filetime_to_datetime(high: int, low: int) -> datetime:
    """
    Convert the two halves of a FILETIME to a local date-time.

    Args:
        high: Upper 32 bits (dwHighDateTime)
        low: Lower 32 bits (dwLowDateTime)

    Returns:
        Timezone-aware datetime in the local time zone
    """
    ticks = ((high & 0xFFFFFFFF) << 32) | (low & 0xFFFFFFFF)
    utc = FILETIME_EPOCH + timedelta(microseconds=ticks // 10)
    return utc.astimezone(tz.tzlocal())


_reg_query_info_key = None


def _get_reg_query_info_key():
    global _reg_query_info_key

    if _reg_query_info_key is None:
        advapi32 = ctypes.WinDLL("advapi32")
        func = advapi32.RegQueryInfoKeyW
        func.argtypes = [ctypes.c_void_p] * 11 + [ctypes.POINTER(FILETIME)]
        func.restype = ctypes.c_long
        _reg_query_info_key = func

    return _reg_query_info_key


def get_last_write_time(handle, key_name: Optional[str] = None) -> datetime:
    """
    Query the last time a registry key was written.

    Args:
        handle: Open registry key (winreg.HKEYType or raw handle value)
        key_name: Key path used in the error message

    Returns:
        Last write time as a local, timezone-aware datetime

    Raises:
        LastWriteTimeError: If RegQueryInfoKeyW reports a failure
    """
    filetime = FILETIME()
    error = _get_reg_query_info_key()(
        ctypes.c_void_p(int(handle)),
        None, None, None, None, None, None, None, None, None, None,
        ctypes.byref(filetime),
    )

    if error != ERROR_SUCCESS:
        raise LastWriteTimeError(
            f"Unable to query last write time of '{key_name or handle}': "
            f"{ctypes.FormatError(error).strip()}",
            error,
        )

    return filetime.to_datetime()
