"""
Enumeration of the Uninstall subtree of one hive/view pair.
"""

import logging
from typing import Callable, Iterator, Optional

from core.errors import UninstallKeyError
from core.program import ProgramInfo
from core.registry import (
    RegistryHive,
    RegistryKey,
    RegistryLocation,
    RegistryView,
    as_int,
    as_string,
    open_base_key as open_registry_base_key,
)

logger = logging.getLogger(__name__)

UNINSTALL_KEY_NAME = r"Software\Microsoft\Windows\CurrentVersion\Uninstall"

BaseKeyOpener = Callable[[RegistryHive, RegistryView], RegistryKey]


def enumerate_programs(
    hive: RegistryHive,
    view: RegistryView = RegistryView.DEFAULT,
    skip_parent_keys: bool = False,
    open_base_key: Optional[BaseKeyOpener] = None,
) -> Iterator[ProgramInfo]:
    """
    Yield a ProgramInfo for each installed program under a hive/view.

    Entries are skipped when their key cannot be opened, when they are
    marked SystemComponent=1, when they have no DisplayName, or, with
    skip_parent_keys, when they declare a ParentKeyName. Ownership of each
    yielded record's key passes to the caller.

    Args:
        hive: Registry hive to read
        view: Registry view to read the hive through
        skip_parent_keys: Skip entries that belong to another entry
        open_base_key: Opens the hive root; defaults to the real registry

    Raises:
        UninstallKeyError: If the Uninstall subtree cannot be opened or listed
    """
    opener = open_base_key or open_registry_base_key
    location = RegistryLocation(hive, view)

    try:
        base_key = opener(hive, view)
    except OSError as e:
        raise UninstallKeyError(f"Unable to open {location}: {e}", getattr(e, "winerror", None)) from e

    with base_key:
        try:
            uninstall_key = base_key.open_subkey(UNINSTALL_KEY_NAME)
        except OSError as e:
            raise UninstallKeyError(
                f"Unable to open key '{base_key.name}\\{UNINSTALL_KEY_NAME}'",
                getattr(e, "winerror", None),
            ) from e

        with uninstall_key:
            try:
                subkey_names = uninstall_key.get_subkey_names()
            except OSError as e:
                raise UninstallKeyError(
                    f"Unable to list subkeys of '{uninstall_key.name}'",
                    getattr(e, "winerror", None),
                ) from e

            for subkey_name in subkey_names:
                program = _open_program(uninstall_key, subkey_name, location, skip_parent_keys)
                if program is not None:
                    yield program


def _open_program(
    uninstall_key: RegistryKey,
    subkey_name: str,
    location: RegistryLocation,
    skip_parent_keys: bool,
) -> Optional[ProgramInfo]:
    """
    Open one Uninstall entry and wrap it in a ProgramInfo.

    Returns None, with the entry's key closed, when the entry is skipped.
    """
    try:
        key = uninstall_key.open_subkey(subkey_name)
    except OSError as e:
        logger.debug(f"Unable to open key named '{subkey_name}' in '{uninstall_key.name}': {e}")
        return None

    try:
        if as_int(key.get_value("SystemComponent", 0)) == 1:
            logger.debug(f"Skipping system component '{subkey_name}'")
        elif skip_parent_keys and key.get_value("ParentKeyName") is not None:
            logger.debug(f"Skipping '{subkey_name}': it has a parent entry")
        else:
            name = as_string(key.get_value("DisplayName"))
            if name:
                return ProgramInfo(name, key, location)
            logger.debug(f"Skipping '{subkey_name}': no DisplayName")
    except BaseException:
        key.close()
        raise

    key.close()
    return None
