"""
Scope resolution and aggregation of installed programs.

This is the entry point used by the command line: pick the hive/view pairs
for a scope, enumerate each of them, merge, sort and optionally filter.
"""

import logging
from enum import Enum
from operator import attrgetter
from typing import List, Optional, Sequence, Union

from core.enumerator import BaseKeyOpener, enumerate_programs
from core.program import ProgramInfo
from core.registry import RegistryHive, RegistryLocation, RegistryView
from core.wildcard import filter_by_name
from utils.system_info import is_64bit

logger = logging.getLogger(__name__)


class ProgramScope(Enum):
    """Where to look for installed programs."""

    NONE = "all"
    CURRENT_USER = "current-user"
    MACHINE = "machine"


ScopeArg = Union[ProgramScope, str, None]


def _to_scope(scope: ScopeArg) -> ProgramScope:
    if scope is None:
        return ProgramScope.NONE
    if isinstance(scope, ProgramScope):
        return scope
    return ProgramScope(scope)


def get_registry_locations(scope: ScopeArg = ProgramScope.NONE, is_64bit_os: Optional[bool] = None) -> List[RegistryLocation]:
    """
    Return the hive/view pairs to enumerate for a scope.

    The machine scope covers the 64-bit and 32-bit views of
    HKEY_LOCAL_MACHINE; a 32-bit OS only has the 32-bit one.
    """
    scope = _to_scope(scope)
    if is_64bit_os is None:
        is_64bit_os = is_64bit()

    locations = []
    if scope in (ProgramScope.NONE, ProgramScope.CURRENT_USER):
        locations.append(RegistryLocation(RegistryHive.CURRENT_USER, RegistryView.DEFAULT))

    if scope in (ProgramScope.NONE, ProgramScope.MACHINE):
        if is_64bit_os:
            locations.append(RegistryLocation(RegistryHive.LOCAL_MACHINE, RegistryView.REGISTRY64))
        locations.append(RegistryLocation(RegistryHive.LOCAL_MACHINE, RegistryView.REGISTRY32))

    return locations


def get_program_infos(
    scope: ScopeArg = ProgramScope.NONE,
    skip_parent_keys: bool = False,
    is_64bit_os: Optional[bool] = None,
    open_base_key: Optional[BaseKeyOpener] = None,
) -> List[ProgramInfo]:
    """
    Enumerate every location of a scope and return the programs sorted by name.

    Entries present in more than one view are kept once per view.

    Raises:
        UninstallKeyError: If a location's Uninstall subtree cannot be read
    """
    programs: List[ProgramInfo] = []

    try:
        for location in get_registry_locations(scope, is_64bit_os):
            found = list(enumerate_programs(location.hive, location.view, skip_parent_keys, open_base_key))
            logger.debug(f"Found {len(found)} programs in {location}")
            programs.extend(found)
    except BaseException:
        close_programs(programs)
        raise

    return sorted(programs, key=attrgetter("name"))


def list_programs(
    scope: ScopeArg = ProgramScope.NONE,
    name_patterns: Optional[Sequence[str]] = None,
    *,
    skip_parent_keys: bool = False,
    is_64bit_os: Optional[bool] = None,
    open_base_key: Optional[BaseKeyOpener] = None,
) -> List[ProgramInfo]:
    """
    List installed programs.

    Args:
        scope: Which locations to read (None for all of them)
        name_patterns: Wildcard patterns; a program is kept if it matches any
            (a single string is one pattern)
        skip_parent_keys: Skip entries that declare a ParentKeyName
        is_64bit_os: Override OS architecture detection
        open_base_key: Opens hive roots; defaults to the real registry

    Returns:
        Programs sorted by name. The caller owns them and should close them.

    Raises:
        UninstallKeyError: If a location's Uninstall subtree cannot be read
        ValueError: If a pattern is empty or the scope is unknown
    """
    scope = _to_scope(scope)
    if isinstance(name_patterns, str):
        name_patterns = [name_patterns]
    if name_patterns:
        patterns = list(name_patterns)
        if not all(patterns):
            raise ValueError("Name patterns must not be empty")

    programs = get_program_infos(scope, skip_parent_keys, is_64bit_os, open_base_key)
    if not name_patterns:
        return programs

    try:
        matched = filter_by_name(programs, patterns)
    except BaseException:
        close_programs(programs)
        raise

    kept = set(matched)
    close_programs(program for program in programs if program not in kept)
    return matched


def close_programs(programs) -> None:
    """Release the registry keys of the given programs."""
    for program in programs:
        program.close()
