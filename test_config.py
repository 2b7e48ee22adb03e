"""
Tests for configuration loading, merging and persistence.
"""

import json

from utils.config import Config


def test_defaults_without_file(tmp_path):
    config = Config(str(tmp_path / "config.json"))

    assert config.get("filter.skip_parent_keys") is False
    assert config.get("filter.default_scope") == "all"
    assert config.get("output.default_format") == "table"
    assert config.get("missing.key", "fallback") == "fallback"


def test_user_file_is_deep_merged(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"filter": {"skip_parent_keys": True}}), encoding="utf-8")

    config = Config(str(path))

    assert config.get("filter.skip_parent_keys") is True
    assert config.get("filter.default_scope") == "all"


def test_invalid_file_keeps_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    config = Config(str(path))

    assert config.load() is False
    assert config.get("output.default_format") == "table"


def test_non_object_file_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert Config(str(path)).load() is False


def test_set_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "config.json"
    config = Config(str(path))

    config.set("output.default_format", "json")
    config.set("new.section.value", 3)
    assert config.save() is True

    reloaded = Config(str(path))
    assert reloaded.get("output.default_format") == "json"
    assert reloaded.get("new.section.value") == 3


def test_reset_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    config = Config(str(path))
    config.set("logging.level", "DEBUG")

    assert config.reset_to_defaults() is True
    assert Config(str(path)).get("logging.level") == "WARNING"
    assert config.get_section("logging") == Config.DEFAULT_CONFIG["logging"]
