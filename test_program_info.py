"""
Tests for ProgramInfo: lazy field resolution, value coercion,
install date fallback and release of the registry key.
"""

from datetime import datetime

import pytest
from dateutil import tz

from core.errors import LastWriteTimeError, ProgramDisposedError
from core.program import ProgramInfo, parse_url
from core.version import ProgramVersion

from conftest import DEFAULT_LAST_WRITE

FIELDS = [
    "name", "publisher", "install_date", "size", "version", "comments",
    "install_location", "install_source", "modify_path", "uninstall_string",
    "quiet_uninstall_string", "display_icon", "no_modify", "no_remove",
    "no_repair", "help_link", "url_info_about", "url_update_info",
    "registry_key", "location",
]


def test_string_fields(make_program):
    program = make_program(
        Publisher="Contoso Ltd.",
        Comments="A comment",
        InstallLocation=r"C:\Program Files\Contoso",
        InstallSource=r"C:\Temp\setup",
        ModifyPath="setup.exe /modify",
        UninstallString="setup.exe /uninstall",
        QuietUninstallString="setup.exe /uninstall /quiet",
        DisplayIcon=r"C:\Program Files\Contoso\app.exe,0",
    )

    assert program.publisher == "Contoso Ltd."
    assert program.comments == "A comment"
    assert program.install_location == r"C:\Program Files\Contoso"
    assert program.install_source == r"C:\Temp\setup"
    assert program.modify_path == "setup.exe /modify"
    assert program.uninstall_string == "setup.exe /uninstall"
    assert program.quiet_uninstall_string == "setup.exe /uninstall /quiet"
    assert program.display_icon == r"C:\Program Files\Contoso\app.exe,0"


def test_missing_values_are_absent(make_program):
    program = make_program()

    assert program.publisher is None
    assert program.size is None
    assert program.version is None
    assert program.help_link is None
    assert program.no_modify is False
    assert program.no_remove is False
    assert program.no_repair is False


def test_string_field_with_wrong_type_is_absent(make_program):
    program = make_program(Publisher=42)
    assert program.publisher is None


def test_size_and_version(make_program):
    program = make_program(EstimatedSize=20480, DisplayVersion="1.2.3.4")

    assert program.size == 20480
    assert program.version == ProgramVersion(1, 2, 3, 4)


def test_malformed_size_and_version_are_absent(make_program):
    program = make_program(EstimatedSize="big", DisplayVersion="1.0 beta")

    assert program.size is None
    assert program.version is None


def test_flags(make_program):
    program = make_program(NoModify=1, NoRemove=0, NoRepair=2)

    assert program.no_modify is True
    assert program.no_remove is False
    assert program.no_repair is False


def test_urls(make_program):
    program = make_program(
        HelpLink="https://contoso.example/help",
        URLInfoAbout="not a url",
        URLUpdateInfo=r"C:\Program Files\Contoso",
    )

    assert program.help_link == "https://contoso.example/help"
    assert program.url_info_about is None
    assert program.url_update_info is None


@pytest.mark.parametrize("text, expected", [
    ("http://example.com", "http://example.com"),
    ("  https://example.com/a?b=c  ", "https://example.com/a?b=c"),
    ("mailto:support@example.com", "mailto:support@example.com"),
    ("www.example.com", None),
    ("/relative/path", None),
    ("", None),
    (None, None),
])
def test_parse_url(text, expected):
    assert parse_url(text) == expected


def test_fields_are_read_once(make_program):
    program = make_program(Publisher="Contoso", EstimatedSize=10)
    key = program.registry_key

    assert program.publisher == "Contoso"
    assert program.publisher == "Contoso"
    assert program.size == 10
    assert program.size == 10

    assert key.reads.count("Publisher") == 1
    assert key.reads.count("EstimatedSize") == 1


def test_read_failure_degrades_to_default(make_program):
    program = make_program(Publisher=OSError("boom"), NoRemove=OSError("boom"))

    assert program.publisher is None
    assert program.no_remove is False


def test_install_date_from_registry(make_program):
    program = make_program(InstallDate="20230415")

    assert program.install_date == datetime(2023, 4, 15, tzinfo=tz.tzlocal())
    assert program.install_date.hour == 0


@pytest.mark.parametrize("install_date", [
    "20231332",
    "20230230",
    "2023-04-15",
    "2023041",
    "202304150",
    "abcdefgh",
    "",
    20230415,
])
def test_install_date_falls_back_to_last_write_time(make_program, install_date):
    program = make_program(InstallDate=install_date)
    assert program.install_date == DEFAULT_LAST_WRITE


def test_install_date_missing_falls_back(make_program):
    program = make_program()
    assert program.install_date == DEFAULT_LAST_WRITE


def test_install_date_fallback_failure_propagates(make_program, metadata_failure):
    program = make_program(last_write_time=metadata_failure)

    with pytest.raises(LastWriteTimeError) as excinfo:
        program.install_date

    assert excinfo.value.error_code == 6


def test_name_must_not_be_empty(registry):
    with pytest.raises(ValueError):
        ProgramInfo("", None)


def test_close_releases_key_once(make_program):
    program = make_program()
    key = program.registry_key

    program.close()
    program.close()

    assert program.closed
    assert key.closed
    assert key.close_count == 1


@pytest.mark.parametrize("field", FIELDS)
def test_access_after_close_raises(make_program, field):
    program = make_program(Publisher="Contoso")
    program.close()

    for _ in range(2):
        with pytest.raises(ProgramDisposedError):
            getattr(program, field)


def test_cached_field_still_raises_after_close(make_program):
    program = make_program(Publisher="Contoso")
    assert program.publisher == "Contoso"

    program.close()

    with pytest.raises(ProgramDisposedError):
        program.publisher
    with pytest.raises(ProgramDisposedError):
        str(program)


def test_context_manager(make_program):
    with make_program() as program:
        key = program.registry_key
        assert program.name == "Test Program"

    assert key.closed
    assert "closed" in repr(program)


def test_str_is_name(make_program):
    assert str(make_program("Notepad++")) == "Notepad++"


def test_to_dict(make_program):
    program = make_program(
        "Contoso App",
        Publisher="Contoso",
        DisplayVersion="2.5",
        InstallDate="20230415",
        EstimatedSize=100,
        NoRemove=1,
    )

    data = program.to_dict()

    assert data["name"] == "Contoso App"
    assert data["version"] == "2.5"
    assert data["publisher"] == "Contoso"
    assert data["install_date"].startswith("2023-04-15T00:00:00")
    assert data["size"] == 100
    assert data["no_remove"] is True
    assert data["location"] is None
    assert data["registry_key"].endswith("\\Contoso App")


def test_records_compare_by_identity(make_program):
    first = make_program("Same")
    second = make_program("Same")

    assert first != second
    assert len({first, second, first}) == 2
