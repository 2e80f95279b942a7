"""Tests for cwevents/levels.py"""

import pytest

from cwevents.levels import DEFAULT_LEVEL, Level, parse_level


class TestParseLevel:
    @pytest.mark.parametrize("name", ["ERROR", "error", "Error", " error "])
    def test_case_insensitive(self, name):
        assert parse_level(name) is Level.ERROR

    @pytest.mark.parametrize(
        "alias, expected",
        [
            ("warning", Level.WARN),
            ("CRITICAL", Level.CRIT),
            ("emergency", Level.EMERG),
            ("err", Level.ERROR),
        ],
    )
    def test_aliases(self, alias, expected):
        assert parse_level(alias) is expected

    def test_every_member_parses_from_its_name(self):
        for level in Level:
            assert parse_level(level.value) is level

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError):
            parse_level("LOUD")

    def test_empty_string_raises(self):
        with pytest.raises(ValueError):
            parse_level("")

    @pytest.mark.parametrize("value", [3, None, ["INFO"], True])
    def test_non_string_raises(self, value):
        with pytest.raises(ValueError):
            parse_level(value)


class TestLevel:
    def test_default_is_info(self):
        assert DEFAULT_LEVEL is Level.INFO

    def test_str_is_name(self):
        assert str(Level.WARN) == "WARN"
