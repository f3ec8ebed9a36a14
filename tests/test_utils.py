from datetime import date

import pytest
import pytz

from onething.utils.datetime_utils import (
    format_time_12h,
    is_at_or_after,
    local_date_str,
    minutes_between,
    parse_time,
    seconds_until,
    today_str,
    yesterday_str,
)
from onething.utils.validators import (
    MAX_NAME_LENGTH,
    validate_date_string,
    validate_level,
    validate_mood,
    validate_name_input,
    validate_note_input,
    validate_proof_type,
    validate_task_input,
    validate_time_string,
)

from tests.helpers import DST_MORNINGS, at, wall_clock_after


class TestDatetime:

    def test_local_date_str_uses_the_local_calendar(self):
        tokyo = pytz.timezone("Asia/Tokyo")
        late_utc = at(23, 30)
        assert local_date_str(late_utc) == "2024-03-15"
        assert local_date_str(late_utc.astimezone(tokyo)) == "2024-03-16"
        assert today_str(late_utc) == "2024-03-15"

    def test_yesterday_across_month_and_leap_day(self):
        assert yesterday_str(date(2024, 3, 1)) == "2024-02-29"
        assert yesterday_str(at(0, 5, day=1)) == "2024-02-29"
        assert yesterday_str(date(2023, 1, 1)) == "2022-12-31"

    @pytest.mark.parametrize("value,expected", [
        ("00:00", (0, 0)),
        ("09:05", (9, 5)),
        ("23:59", (23, 59)),
    ])
    def test_parse_time(self, value, expected):
        assert parse_time(value) == expected

    @pytest.mark.parametrize("value", ["24:00", "12:60", "12", "12:5", "9:05", "009:00", "ab:cd", "-1:00", ""])
    def test_parse_time_rejects(self, value):
        with pytest.raises(ValueError):
            parse_time(value)

    def test_minutes_between_is_symmetric(self):
        assert minutes_between("18:30", "19:00") == 30
        assert minutes_between("19:00", "18:30") == 30

    def test_cutoff_comparison(self):
        assert is_at_or_after("21:00", "21:00")
        assert is_at_or_after("23:15", "21:00")
        assert not is_at_or_after("20:59", "21:00")

    def test_seconds_until(self):
        assert seconds_until("10:30", at(9, 0)) == 5400
        assert seconds_until("09:00", at(9, 0)) == 0
        assert seconds_until("08:00", at(9, 0)) < 0

    @pytest.mark.parametrize("now", DST_MORNINGS, ids=["spring-forward", "fall-back"])
    def test_seconds_until_on_dst_change(self, now):
        for planned in ("12:00", "20:30", "20:59"):
            assert wall_clock_after(now, seconds_until(planned, now)) == planned

    def test_seconds_until_across_dst_gap(self):
        spring, fall = DST_MORNINGS
        assert seconds_until("20:30", spring) == (19 * 60 + 30) * 60 - 3600
        assert seconds_until("20:30", fall) == 20 * 3600 + 3600

    @pytest.mark.parametrize("value,expected", [
        ("00:15", "12:15 AM"),
        ("09:05", "9:05 AM"),
        ("12:00", "12:00 PM"),
        ("18:30", "6:30 PM"),
    ])
    def test_format_time_12h(self, value, expected):
        assert format_time_12h(value) == expected


class TestValidators:

    def test_task_input(self):
        assert validate_task_input("  Walk  ").sanitized == "Walk"
        assert validate_task_input("   ").error == "Task cannot be empty"
        assert not validate_task_input("x" * 501).valid
        assert validate_task_input("x" * 500).valid

    def test_task_keeps_line_breaks_and_tabs(self):
        assert validate_task_input("a\tb\r\nc\x00").sanitized == "a\tb\r\nc"

    def test_name_input(self):
        assert validate_name_input("  Ana\n ").sanitized == "Ana"
        assert validate_name_input("").valid
        assert not validate_name_input("n" * (MAX_NAME_LENGTH + 1)).valid

    def test_note_input(self):
        assert validate_note_input(" fi\x07ne ").sanitized == "fine"
        assert not validate_note_input("n" * 501).valid

    def test_enumerations(self):
        assert validate_mood("calm") == "calm"
        assert validate_mood("ecstatic") is None
        assert validate_mood(None) is None
        assert validate_proof_type("screenshot") == "screenshot"
        assert validate_proof_type("video") is None

    @pytest.mark.parametrize("value,expected", [(1, 1), (3, 3), (0, None), (4, None), (True, None), ("2", None)])
    def test_level(self, value, expected):
        assert validate_level(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("2024-02-29", "2024-02-29"),
        ("2023-02-29", None),
        ("2024-3-1", None),
        ("yesterday", None),
        (20240301, None),
    ])
    def test_date_string(self, value, expected):
        assert validate_date_string(value) == expected

    def test_time_string(self):
        assert validate_time_string("07:45") == "07:45"
        assert validate_time_string("7:45pm") is None
        assert validate_time_string("7:45") is None
        assert validate_time_string(None) is None
