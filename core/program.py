"""
Installed program records backed by an Uninstall registry key.
"""

import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlsplit

from dateutil import tz

from core.errors import ProgramDisposedError
from core.registry import RegistryLocation, as_int, as_string
from core.version import ProgramVersion, parse_version

logger = logging.getLogger(__name__)

_INSTALL_DATE_PATTERN = re.compile(r"[0-9]{8}")


def parse_url(text: Optional[str]) -> Optional[str]:
    """
    Return text if it is an absolute URL, otherwise None.

    Single-letter schemes are rejected so that drive paths such as
    C:\\Program Files are not mistaken for URLs.
    """
    if not isinstance(text, str):
        return None

    text = text.strip()
    try:
        parts = urlsplit(text)
    except ValueError:
        return None

    if len(parts.scheme) < 2 or not (parts.netloc or parts.path):
        return None
    return text


class ProgramInfo:
    """
    A program installed on the local computer.

    Only the name is read up front. Every other field is read from the
    registry on first access and cached. A field whose data is missing or
    malformed resolves to None (False for the No* flags) instead of raising.

    The record owns its registry key. After close() every property raises
    ProgramDisposedError.
    """

    def __init__(self, name: str, key, location: Optional[RegistryLocation] = None):
        """
        Args:
            name: Program name (the DisplayName value), must be non-empty
            key: Open registry key holding the program's values
            location: Hive/view pair the key was read from
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Program name must be a non-empty string")

        self._name = name
        self._key = key
        self._location = location
        self._values: Dict[str, Any] = {}

    # ── Identity ──────────────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        self._check_open()
        return self._name

    @property
    def location(self) -> Optional[RegistryLocation]:
        self._check_open()
        return self._location

    @property
    def registry_key(self):
        """The open registry key that contains the program information."""
        self._check_open()
        return self._key

    @property
    def closed(self) -> bool:
        return self._key is None

    # ── Lazily resolved fields ────────────────────────────────────────────────

    @property
    def publisher(self) -> Optional[str]:
        return self._resolve("publisher", lambda: self._read_string("Publisher"))

    @property
    def install_date(self) -> datetime:
        """
        The date the program was installed.

        Taken from InstallDate (YYYYMMDD, local midnight) when it is valid,
        otherwise the last write time of the program's registry key.

        Raises:
            LastWriteTimeError: If the fallback query fails
        """
        return self._resolve("install_date", self._read_install_date, absorb=False)

    @property
    def size(self) -> Optional[int]:
        """Estimated size in kilobytes (EstimatedSize)."""
        return self._resolve("size", lambda: as_int(self._key.get_value("EstimatedSize")))

    @property
    def version(self) -> Optional[ProgramVersion]:
        return self._resolve("version", lambda: parse_version(self._read_string("DisplayVersion")))

    @property
    def comments(self) -> Optional[str]:
        return self._resolve("comments", lambda: self._read_string("Comments"))

    @property
    def install_location(self) -> Optional[str]:
        return self._resolve("install_location", lambda: self._read_string("InstallLocation"))

    @property
    def install_source(self) -> Optional[str]:
        return self._resolve("install_source", lambda: self._read_string("InstallSource"))

    @property
    def modify_path(self) -> Optional[str]:
        return self._resolve("modify_path", lambda: self._read_string("ModifyPath"))

    @property
    def uninstall_string(self) -> Optional[str]:
        return self._resolve("uninstall_string", lambda: self._read_string("UninstallString"))

    @property
    def quiet_uninstall_string(self) -> Optional[str]:
        return self._resolve("quiet_uninstall_string", lambda: self._read_string("QuietUninstallString"))

    @property
    def display_icon(self) -> Optional[str]:
        return self._resolve("display_icon", lambda: self._read_string("DisplayIcon"))

    @property
    def no_modify(self) -> bool:
        return self._resolve("no_modify", lambda: self._read_flag("NoModify"), default=False)

    @property
    def no_remove(self) -> bool:
        return self._resolve("no_remove", lambda: self._read_flag("NoRemove"), default=False)

    @property
    def no_repair(self) -> bool:
        return self._resolve("no_repair", lambda: self._read_flag("NoRepair"), default=False)

    @property
    def help_link(self) -> Optional[str]:
        return self._resolve("help_link", lambda: parse_url(self._read_string("HelpLink")))

    @property
    def url_info_about(self) -> Optional[str]:
        return self._resolve("url_info_about", lambda: parse_url(self._read_string("URLInfoAbout")))

    @property
    def url_update_info(self) -> Optional[str]:
        return self._resolve("url_update_info", lambda: parse_url(self._read_string("URLUpdateInfo")))

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Release the registry key. Further field access raises ProgramDisposedError."""
        key = getattr(self, "_key", None)
        if key is not None:
            self._key = None
            key.close()

    def __enter__(self) -> "ProgramInfo":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __del__(self):
        self.close()

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        suffix = " (closed)" if self.closed else ""
        return f"<ProgramInfo {self._name!r}{suffix}>"

    def to_dict(self) -> Dict[str, Any]:
        """Resolve every field into JSON-serializable values."""
        version = self.version
        location = self.location
        return {
            "name": self.name,
            "version": str(version) if version else None,
            "publisher": self.publisher,
            "install_date": self.install_date.isoformat(),
            "size": self.size,
            "comments": self.comments,
            "install_location": self.install_location,
            "install_source": self.install_source,
            "modify_path": self.modify_path,
            "uninstall_string": self.uninstall_string,
            "quiet_uninstall_string": self.quiet_uninstall_string,
            "display_icon": self.display_icon,
            "no_modify": self.no_modify,
            "no_remove": self.no_remove,
            "no_repair": self.no_repair,
            "help_link": self.help_link,
            "url_info_about": self.url_info_about,
            "url_update_info": self.url_update_info,
            "location": location.label if location else None,
            "registry_key": self._key.name,
        }

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _check_open(self) -> None:
        if self._key is None:
            raise ProgramDisposedError(type(self).__name__)

    def _resolve(self, field: str, loader: Callable[[], Any], default: Any = None, absorb: bool = True) -> Any:
        """
        Return the cached value of a field, loading it on first access.

        With absorb set, a registry or parsing failure caches default
        instead of propagating.
        """
        self._check_open()
        if field in self._values:
            return self._values[field]

        try:
            value = loader()
        except (OSError, ValueError, TypeError) as e:
            if not absorb:
                raise
            logger.debug(f"Could not resolve {field} of '{self._name}': {e}")
            value = default

        self._values[field] = value
        return value

    def _read_string(self, value_name: str) -> Optional[str]:
        return as_string(self._key.get_value(value_name))

    def _read_flag(self, value_name: str) -> bool:
        return as_int(self._key.get_value(value_name, 0)) == 1

    def _read_install_date(self) -> datetime:
        install_date = self._read_string("InstallDate")

        if install_date is not None and _INSTALL_DATE_PATTERN.fullmatch(install_date):
            year = int(install_date[:4])
            month = int(install_date[4:6])
            day = int(install_date[6:8])
            try:
                return datetime(year, month, day, tzinfo=tz.tzlocal())
            except ValueError:
                logger.debug(f"InstallDate '{install_date}' of '{self._name}' is not a valid date")

        return self._key.last_write_time()
