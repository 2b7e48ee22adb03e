"""
Shared fixtures: an in-memory registry with the same read surface as
core.registry.RegistryKey, so the listing code runs without Windows.
"""

from datetime import datetime, timezone

import pytest

from core.enumerator import UNINSTALL_KEY_NAME
from core.errors import LastWriteTimeError
from core.program import ProgramInfo
from core.registry import RegistryHive, RegistryView

DEFAULT_LAST_WRITE = datetime(2020, 6, 1, 12, 30, tzinfo=timezone.utc)


class FakeNode:
    """A key in the fake registry tree."""

    def __init__(self, values=None, last_write_time=DEFAULT_LAST_WRITE, accessible=True):
        self.values = dict(values or {})
        self.subkeys = {}
        self.last_write_time = last_write_time
        self.accessible = accessible

    def child(self, name):
        for key_name, node in self.subkeys.items():
            if key_name.lower() == name.lower():
                return node
        return None

    def ensure_path(self, path):
        node = self
        for part in path.split("\\"):
            existing = node.child(part)
            if existing is None:
                existing = node.subkeys[part] = FakeNode()
            node = existing
        return node


class FakeRegistryKey:
    """Open handle on a FakeNode; records reads and closes."""

    def __init__(self, registry, node, name):
        self.registry = registry
        self.node = node
        self.name = name
        self.closed = False
        self.close_count = 0
        self.reads = []
        registry.handles.append(self)

    def _check(self):
        if self.closed:
            raise ValueError(f"Registry key '{self.name}' is closed")

    def open_subkey(self, path):
        self._check()
        node = self.node
        for part in path.split("\\"):
            node = node.child(part)
            if node is None:
                raise FileNotFoundError(2, "The system cannot find the file specified", path)
        if not node.accessible:
            raise PermissionError(5, "Access is denied", path)
        return FakeRegistryKey(self.registry, node, f"{self.name}\\{path}")

    def get_subkey_names(self):
        self._check()
        return list(self.node.subkeys)

    def get_value(self, value_name, default=None):
        self._check()
        self.reads.append(value_name)
        value = self.node.values.get(value_name, default)
        if isinstance(value, Exception):
            raise value
        return value

    def last_write_time(self):
        self._check()
        if isinstance(self.node.last_write_time, Exception):
            raise self.node.last_write_time
        return self.node.last_write_time

    def close(self):
        if not self.closed:
            self.closed = True
            self.close_count += 1

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class FakeRegistry:
    """Hive/view roots holding Uninstall entries."""

    def __init__(self):
        self.roots = {}
        self.handles = []
        self.opened_locations = []

    def add_location(self, hive, view=RegistryView.DEFAULT):
        root = self.roots.setdefault((hive, view), FakeNode())
        return root.ensure_path(UNINSTALL_KEY_NAME)

    def add_program(self, hive, view, key_name, last_write_time=DEFAULT_LAST_WRITE, accessible=True, **values):
        uninstall = self.add_location(hive, view)
        node = uninstall.subkeys[key_name] = FakeNode(values, last_write_time, accessible)
        return node

    def open_base_key(self, hive, view=RegistryView.DEFAULT):
        self.opened_locations.append((hive, view))
        root = self.roots.get((hive, view))
        if root is None:
            raise FileNotFoundError(2, "The system cannot find the file specified", hive.value)
        return FakeRegistryKey(self, root, hive.value)

    def open_handles(self):
        return [handle for handle in self.handles if not handle.closed]


@pytest.fixture
def registry():
    return FakeRegistry()


@pytest.fixture
def make_program(registry):
    """Build a ProgramInfo over a standalone fake key."""

    def factory(name="Test Program", last_write_time=DEFAULT_LAST_WRITE, **values):
        node = FakeNode(values, last_write_time)
        key = FakeRegistryKey(registry, node, f"HKEY_CURRENT_USER\\{UNINSTALL_KEY_NAME}\\{name}")
        return ProgramInfo(name, key)

    return factory


@pytest.fixture
def metadata_failure():
    return LastWriteTimeError("Unable to query last write time", 6)


