"""
Tests for the command line interface.
"""

import pytest

from cali.cli.main import cli
from cali.services.calendar_store import CalendarStore


@pytest.fixture
def invoke(runner, db_path):
    def _invoke(*args, input=None):
        return runner.invoke(cli, ["--db", db_path, *args], input=input)
    return _invoke


def test_calendar_without_name_uses_fallback(invoke):
    result = invoke("calendar")
    assert result.exit_code == 0, result.output
    assert "default calendar" in result.output


def test_add_and_search(invoke, db_path):
    result = invoke("add", "dentist", "--start", "2023-07-23 10:00", "--end", "2023-07-23 11:00",
                    "--recurring", "Yearly", "-C", "personal")
    assert result.exit_code == 0, result.output
    assert "dentist" in result.output

    store = CalendarStore(db_path)
    [event] = store.find_events("personal", "dentist", exact=True)
    assert event.recurring.value == "Yearly"
    assert store.get_default_name() == "personal"

    result = invoke("search", "dent")
    assert result.exit_code == 0, result.output
    assert "dentist" in result.output
    assert "UTC" in result.output


def test_search_without_matches(invoke):
    result = invoke("search", "nothing", "--exact")
    assert result.exit_code == 0
    assert "No events found" in result.output


def test_update_event(invoke, db_path):
    invoke("add", "standup", "--start", "09:00", "--end", "09:15", "-C", "work")

    result = invoke("update", "standup", "--start", "09:30", "-C", "work")
    assert result.exit_code == 0, result.output

    [event] = CalendarStore(db_path).find_events("work", "standup", exact=True)
    assert event.start == "09:30"
    assert event.end == "09:15"


def test_update_requires_a_change(invoke):
    result = invoke("update", "standup")
    assert result.exit_code == 2
    assert "Nothing to update" in result.output


def test_update_missing_event_fails(invoke):
    result = invoke("update", "ghost", "--name", "boo")
    assert result.exit_code == 1
    assert "No event named 'ghost'" in result.output


def test_remove_event(invoke, db_path):
    invoke("add", "one", "--start", "s", "--end", "e")
    invoke("add", "two", "--start", "s", "--end", "e")

    result = invoke("remove", "one")
    assert result.exit_code == 0, result.output

    events = CalendarStore(db_path).find_events("default calendar", "", exact=False)
    assert [event.name for event in events] == ["two"]


def test_remove_ambiguous_event_fails(invoke):
    invoke("add", "dup", "--start", "s", "--end", "e")
    invoke("add", "dup", "--start", "s", "--end", "e")

    result = invoke("remove", "dup")
    assert result.exit_code == 1
    assert "2 events named 'dup'" in result.output


def test_set_default(invoke, db_path):
    invoke("add", "a", "--start", "s", "--end", "e", "-C", "home")
    invoke("add", "b", "--start", "s", "--end", "e", "-C", "work")

    result = invoke("calendar", "work", "--set-default")
    assert result.exit_code == 0, result.output
    assert "'work' is now set as default." in result.output
    assert CalendarStore(db_path).get_default_name() == "work"


def test_rename_prompts_for_new_name(invoke, db_path):
    invoke("add", "a", "--start", "s", "--end", "e", "-C", "home")

    result = invoke("calendar", "home", "-r", input="house\n")
    assert result.exit_code == 0, result.output
    assert "'home' was renamed to 'house'." in result.output

    assert CalendarStore(db_path).list_calendars() == [("house", True)]


def test_rename_to_existing_name_exits_non_zero(invoke):
    invoke("add", "a", "--start", "s", "--end", "e", "-C", "home")
    invoke("add", "b", "--start", "s", "--end", "e", "-C", "work")

    result = invoke("calendar", "home", "-r", input="work\n")
    assert result.exit_code == 1
    assert "Calendar 'work' already exists." in result.output


def test_delete_calendar(invoke, db_path):
    invoke("add", "a", "--start", "s", "--end", "e", "-C", "home")

    result = invoke("calendar", "home", "-d")
    assert result.exit_code == 0, result.output
    assert "'home' was deleted." in result.output
    assert not CalendarStore(db_path).calendar_exists("home")


def test_list_calendars(invoke):
    result = invoke("list")
    assert "No calendars found" in result.output

    invoke("add", "a", "--start", "s", "--end", "e", "-C", "home")
    invoke("add", "b", "--start", "s", "--end", "e", "-C", "work")

    result = invoke("list")
    assert result.exit_code == 0, result.output
    assert "home" in result.output
    assert "work" in result.output


def test_storage_failure_exits_non_zero(runner, tmp_path):
    bad_path = tmp_path / "calendar.db"
    bad_path.write_bytes(b"this is not a sqlite database" * 10)

    result = runner.invoke(cli, ["--db", str(bad_path), "calendar"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_bare_invocation_selects_default_calendar(invoke):
    result = invoke()
    assert result.exit_code == 0, result.output
    assert "Using calendar default calendar (default)" in result.output


def test_name_and_flags_at_top_level(invoke, db_path):
    invoke("add", "a", "--start", "s", "--end", "e", "-C", "home")
    invoke("add", "b", "--start", "s", "--end", "e", "-C", "work")

    result = invoke("work", "-s")
    assert result.exit_code == 0, result.output
    assert "'work' is now set as default." in result.output
    assert CalendarStore(db_path).get_default_name() == "work"

    result = invoke()
    assert "Using calendar work (default)" in result.output


def test_flags_without_name_use_default_calendar(invoke, db_path):
    invoke("add", "a", "--start", "s", "--end", "e", "-C", "home")

    result = invoke("-d")
    assert result.exit_code == 0, result.output
    assert "'home' was deleted." in result.output
    assert not CalendarStore(db_path).calendar_exists("home")


def test_top_level_help_still_shows_commands(invoke):
    result = invoke("--help")
    assert result.exit_code == 0
    assert "search" in result.output


def test_set_default_on_empty_calendar_says_no_default(invoke, db_path):
    invoke("add", "a", "--start", "s", "--end", "e", "-C", "home")

    result = invoke("empty", "-s")
    assert result.exit_code == 0, result.output
    assert "'empty' has no events yet, so no calendar is default now." in result.output
    assert "is now set as default" not in result.output
    assert CalendarStore(db_path).get_default_name() is None


def test_unknown_log_level_falls_back(invoke, monkeypatch):
    monkeypatch.setenv("CALI_LOG_LEVEL", "LOUD")
    result = invoke("list")
    assert result.exit_code == 0, result.output
