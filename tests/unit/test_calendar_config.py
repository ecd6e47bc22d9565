"""
Unit tests for the clinic calendar model.
"""

from datetime import date, time

import pytest
from pydantic import ValidationError

from clinic_scheduling.config import Settings
from clinic_scheduling.exceptions import InvalidCalendarConfig
from clinic_scheduling.models.calendar import (
    ClinicCalendarConfig,
    Weekday,
    format_clock,
    parse_clock,
)


class TestClockParsing:
    """Test "HH:MM" boundary conversion."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("08:00", 480),
            ("8:05", 485),
            ("12:30", 750),
            ("18:00:00", 1080),
            ("00:00", 0),
            ("24:00", 1440),
            (time(13, 15), 795),
            (600, 600),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_clock(value) == expected

    @pytest.mark.parametrize(
        "value", ["25:00", "12:60", "noon", "12h30", "", "12:00:30", -1, 1441, True, None, 12.5]
    )
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            parse_clock(value)

    def test_time_with_seconds_rejected(self):
        with pytest.raises(ValueError):
            parse_clock(time(9, 0, 30))

    def test_format_clock(self):
        assert format_clock(485) == "08:05"
        assert format_clock(0) == "00:00"
        assert format_clock(1440) == "24:00"


class TestWeekday:
    """Test weekday resolution."""

    def test_of_date(self):
        assert Weekday.of(date(2026, 10, 19)) == Weekday.MONDAY
        assert Weekday.of(date(2026, 10, 24)) == Weekday.SATURDAY
        assert Weekday.of(date(2026, 10, 18)) == Weekday.SUNDAY


class TestClinicCalendarConfig:
    """Test calendar construction and invariants."""

    def test_defaults(self):
        config = ClinicCalendarConfig()
        assert config.work_start == 480
        assert config.work_end == 1080
        assert config.has_lunch_break is True
        assert config.lunch_window == (720, 780)
        assert Weekday.SATURDAY not in config.working_days
        assert len(config.working_days) == 5

    def test_clock_strings_parsed(self):
        config = ClinicCalendarConfig(work_start="07:30", work_end="19:00")
        assert config.work_start == 450
        assert config.work_end == 1140

    def test_working_days_case_insensitive(self):
        config = ClinicCalendarConfig(working_days=["Monday", " SATURDAY "])
        assert config.working_days == frozenset({Weekday.MONDAY, Weekday.SATURDAY})

    def test_unknown_weekday_rejected(self):
        with pytest.raises(ValidationError):
            ClinicCalendarConfig(working_days=["segunda"])

    def test_single_string_working_days_rejected(self):
        with pytest.raises(ValidationError):
            ClinicCalendarConfig(working_days="monday")

    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError):
            ClinicCalendarConfig(work_start="18:00", work_end="08:00")

    def test_equal_start_and_end_rejected(self):
        with pytest.raises(ValidationError):
            ClinicCalendarConfig(work_start="09:00", work_end="09:00")

    def test_inverted_lunch_rejected(self):
        with pytest.raises(ValidationError):
            ClinicCalendarConfig(lunch_start="13:00", lunch_end="12:00")

    def test_inverted_lunch_ignored_when_disabled(self):
        config = ClinicCalendarConfig(has_lunch_break=False, lunch_start="13:00", lunch_end="12:00")
        assert config.lunch_window is None

    def test_zero_width_lunch(self):
        config = ClinicCalendarConfig(lunch_start="12:00", lunch_end="12:00")
        assert config.lunch_window is None

    def test_lunch_outside_hours_clamped_away(self):
        config = ClinicCalendarConfig(work_start="13:00", work_end="18:00")
        assert config.lunch_window is None

    def test_is_working_day(self):
        config = ClinicCalendarConfig()
        assert config.is_working_day(date(2026, 10, 19)) is True
        assert config.is_working_day(date(2026, 10, 18)) is False

    def test_frozen(self):
        config = ClinicCalendarConfig()
        with pytest.raises(ValidationError):
            config.work_start = 600


class TestFromClinicRecord:
    """Test loading from stored clinic settings."""

    @pytest.fixture
    def settings(self):
        return Settings()

    def test_empty_record_uses_defaults(self, settings):
        config = ClinicCalendarConfig.from_clinic_record({}, settings)
        assert config == ClinicCalendarConfig()

    def test_null_and_empty_fields_use_defaults(self, settings):
        record = {"work_start": None, "work_end": "", "lunch_start": None}
        config = ClinicCalendarConfig.from_clinic_record(record, settings)
        assert config.work_start == 480
        assert config.work_end == 1080
        assert config.lunch_start == 720

    def test_stored_values_win(self, settings):
        record = {
            "working_days": ["monday", "wednesday", "saturday"],
            "work_start": "09:00",
            "work_end": "17:30",
            "has_lunch_break": True,
            "lunch_start": "12:30",
            "lunch_end": "13:30",
            "name": "Clínica Sorriso",
        }
        config = ClinicCalendarConfig.from_clinic_record(record, settings)
        assert config.working_days == frozenset(
            {Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.SATURDAY}
        )
        assert config.work_start == 540
        assert config.work_end == 1050
        assert config.lunch_window == (750, 810)

    def test_lunch_disabled_only_when_explicitly_false(self, settings):
        assert ClinicCalendarConfig.from_clinic_record(
            {"has_lunch_break": False}, settings
        ).has_lunch_break is False
        assert ClinicCalendarConfig.from_clinic_record(
            {"has_lunch_break": None}, settings
        ).has_lunch_break is True
        assert ClinicCalendarConfig.from_clinic_record(
            {"has_lunch_break": 0}, settings
        ).has_lunch_break is True

    def test_empty_working_days_kept(self, settings):
        config = ClinicCalendarConfig.from_clinic_record({"working_days": []}, settings)
        assert config.working_days == frozenset()

    def test_settings_defaults_applied(self):
        settings = Settings(DEFAULT_WORK_START="07:00", DEFAULT_HAS_LUNCH_BREAK=False)
        config = ClinicCalendarConfig.from_clinic_record({}, settings)
        assert config.work_start == 420
        assert config.has_lunch_break is False

    def test_malformed_record_raises_typed_error(self, settings):
        with pytest.raises(InvalidCalendarConfig):
            ClinicCalendarConfig.from_clinic_record({"work_start": "8am"}, settings)

    def test_contradictory_record_raises_typed_error(self, settings):
        with pytest.raises(InvalidCalendarConfig):
            ClinicCalendarConfig.from_clinic_record(
                {"work_start": "18:00", "work_end": "08:00"}, settings
            )
