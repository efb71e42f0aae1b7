"""Tests for time arithmetic helpers."""

from datetime import date, time

import pytest

from barberbook.core import ParseError, format_hhmm, overlaps, parse_date, parse_hhmm, to_time, weekday_of


class TestParseHHMM:
    def test_hours_and_minutes(self):
        assert parse_hhmm("09:30") == 570

    def test_seconds_are_truncated(self):
        assert parse_hhmm("17:45:59") == 17 * 60 + 45

    def test_store_fractional_seconds(self):
        assert parse_hhmm("08:15:00.000000") == 495

    def test_single_digit_hour(self):
        assert parse_hhmm("9:05") == 545

    def test_time_object(self):
        assert parse_hhmm(time(13, 20)) == 800

    @pytest.mark.parametrize("raw", ["", "9", "09-00", "24:00", "12:60", "ab:cd", "10:00:75"])
    def test_malformed_raises(self, raw):
        with pytest.raises(ParseError):
            parse_hhmm(raw)

    def test_non_string_raises(self):
        with pytest.raises(ParseError):
            parse_hhmm(900)

    def test_parse_error_is_value_error(self):
        assert issubclass(ParseError, ValueError)


class TestFormatting:
    def test_zero_padded(self):
        assert format_hhmm(545) == "09:05"

    def test_midnight(self):
        assert format_hhmm(0) == "00:00"

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            format_hhmm(24 * 60)

    def test_to_time(self):
        assert to_time(615) == time(10, 15)


class TestDates:
    def test_parse_date(self):
        assert parse_date("2030-01-07") == date(2030, 1, 7)

    def test_parse_date_passthrough(self):
        assert parse_date(date(2030, 1, 7)) == date(2030, 1, 7)

    @pytest.mark.parametrize("raw", ["07/01/2030", "2030-1-7", "2030-02-30", ""])
    def test_bad_date(self, raw):
        with pytest.raises(ParseError):
            parse_date(raw)

    def test_weekday_sunday_is_zero(self):
        assert weekday_of(date(2030, 1, 6)) == 0

    def test_weekday_monday_is_one(self):
        assert weekday_of(date(2030, 1, 7)) == 1

    def test_weekday_saturday_is_six(self):
        assert weekday_of(date(2030, 1, 12)) == 6


class TestOverlaps:
    def test_overlapping(self):
        assert overlaps(540, 600, 570, 630)

    def test_touching_edges_do_not_overlap(self):
        assert not overlaps(540, 600, 600, 660)
        assert not overlaps(600, 660, 540, 600)

    def test_contained(self):
        assert overlaps(540, 720, 600, 630)

    def test_works_with_times(self):
        assert overlaps(time(9), time(10), time(9, 30), time(11))
