"""
Tests for domain models.
"""

from datetime import time

import pytest

from tutorslots.domain.exceptions import InvalidSession
from tutorslots.domain.models import FreeSlot, Session, Weekday, parse_clock_time


def _session(text: str) -> Session:
    return Session.parse(text)


class TestWeekday:
    """Tests for Weekday."""

    def test_symbols(self):
        """Every day has a three letter symbol."""
        assert [d.symbol for d in Weekday] == ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"]

    def test_from_symbol(self):
        assert Weekday.from_symbol("WED") is Weekday.WEDNESDAY

    def test_from_symbol_rejects_unknown(self):
        with pytest.raises(InvalidSession) as excinfo:
            Weekday.from_symbol("mon")
        assert excinfo.value.field == "day"


class TestSessionCreate:
    """Tests for building sessions from raw input."""

    def test_create_valid_session(self):
        """Test creating a valid session."""
        session = Session.create("MON", "0900", "1000")

        assert session.day is Weekday.MONDAY
        assert session.start == time(9, 0)
        assert session.end == time(10, 0)
        assert session.duration_minutes() == 60

    def test_minimum_duration_is_inclusive(self):
        """Exactly 15 minutes is allowed, 14 is not."""
        assert Session.create("MON", "1100", "1115").duration_minutes() == 15

        with pytest.raises(InvalidSession) as excinfo:
            Session.create("MON", "1100", "1114")
        assert excinfo.value.field == "duration"

    def test_end_before_start_is_a_duration_error(self):
        with pytest.raises(InvalidSession) as excinfo:
            Session.create("MON", "1000", "0900")
        assert excinfo.value.field == "duration"

    def test_operating_window_bounds_are_inclusive(self):
        """Sessions may start at 08:00 and end at 22:00."""
        session = Session.create("SUN", "0800", "2200")
        assert session.duration_minutes() == 14 * 60

    @pytest.mark.parametrize(
        "start, end",
        [("0745", "0900"), ("2130", "2215"), ("0000", "0100")],
    )
    def test_outside_operating_window(self, start, end):
        with pytest.raises(InvalidSession) as excinfo:
            Session.create("TUE", start, end)
        assert excinfo.value.field == "window"

    @pytest.mark.parametrize("start", ["900", "9am", "09:00", "2400", "0960", ""])
    def test_unparseable_start(self, start):
        with pytest.raises(InvalidSession) as excinfo:
            Session.create("MON", start, "1000")
        assert excinfo.value.field == "start"

    def test_unparseable_end(self):
        with pytest.raises(InvalidSession) as excinfo:
            Session.create("MON", "0900", "2460")
        assert excinfo.value.field == "end"

    def test_validation_order(self):
        """The day is checked before times, duration before the window."""
        with pytest.raises(InvalidSession) as excinfo:
            Session.create("XYZ", "abc", "0800")
        assert excinfo.value.field == "day"

        with pytest.raises(InvalidSession) as excinfo:
            Session.create("MON", "abc", "xyz")
        assert excinfo.value.field == "start"

        with pytest.raises(InvalidSession) as excinfo:
            Session.create("MON", "0700", "0710")
        assert excinfo.value.field == "duration"

    def test_invalid_session_is_a_value_error(self):
        with pytest.raises(ValueError):
            Session.create("MON", "0900", "0905")

    def test_direct_construction_is_validated(self):
        with pytest.raises(InvalidSession):
            Session(day=Weekday.MONDAY, start=time(21, 0), end=time(23, 0))


class TestSessionParse:
    """Tests for the canonical string form."""

    def test_str_is_canonical(self):
        assert str(Session.create("MON", "0900", "1000")) == "MON 0900 - 1000"

    def test_parse_round_trip(self):
        session = Session.create("FRI", "1330", "1515")
        assert Session.parse(str(session)) == session

    def test_parse_accepts_compact_dash(self):
        assert Session.parse("TUE 1300-1400") == Session.create("TUE", "1300", "1400")

    @pytest.mark.parametrize("text", ["Monday 9-10", "MON 0900", "MON 0900 to 1000", ""])
    def test_parse_rejects_malformed(self, text):
        with pytest.raises(InvalidSession) as excinfo:
            Session.parse(text)
        assert excinfo.value.field == "format"

    def test_parse_applies_session_rules(self):
        with pytest.raises(InvalidSession) as excinfo:
            Session.parse("MON 2100 - 2300")
        assert excinfo.value.field == "window"


class TestSessionOverlap:
    """Tests for overlap detection."""

    def test_partial_overlap(self):
        a = _session("MON 0900 - 1100")
        b = _session("MON 1000 - 1200")

        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_back_to_back_sessions_do_not_overlap(self):
        """Half-open intervals: ending at T and starting at T is fine."""
        a = _session("MON 0900 - 1000")
        b = _session("MON 1000 - 1100")

        assert not a.overlaps(b)
        assert not b.overlaps(a)

    def test_one_minute_of_overlap(self):
        a = _session("MON 0900 - 1001")
        b = _session("MON 1000 - 1100")

        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_enclosed_and_identical(self):
        outer = _session("WED 0800 - 1200")
        inner = _session("WED 0900 - 1100")

        assert outer.overlaps(inner)
        assert inner.overlaps(outer)
        assert outer.overlaps(outer)

    def test_different_days_never_overlap(self):
        assert not _session("MON 0900 - 1000").overlaps(_session("TUE 0900 - 1000"))

    def test_overlap_is_symmetric(self):
        sessions = [
            _session(text)
            for text in [
                "MON 0800 - 0900",
                "MON 0845 - 1000",
                "MON 0900 - 0915",
                "MON 0800 - 2200",
                "MON 1000 - 1100",
                "TUE 0800 - 0900",
            ]
        ]
        for a in sessions:
            for b in sessions:
                assert a.overlaps(b) == b.overlaps(a)


class TestSessionOrdering:
    """Tests for equality and ordering."""

    def test_equality_uses_all_fields(self):
        assert Session.create("MON", "0900", "1000") == Session.create("MON", "0900", "1000")
        assert Session.create("MON", "0900", "1000") != Session.create("MON", "0900", "1015")
        assert len({Session.create("MON", "0900", "1000"), _session("MON 0900-1000")}) == 1

    def test_sorted_by_day_then_start_then_end(self):
        sessions = [
            _session("TUE 0800 - 0900"),
            _session("MON 1000 - 1100"),
            _session("MON 0900 - 1000"),
            _session("MON 0900 - 0930"),
            _session("SUN 0800 - 0900"),
        ]

        assert [str(s) for s in sorted(sessions)] == [
            "MON 0900 - 0930",
            "MON 0900 - 1000",
            "MON 1000 - 1100",
            "TUE 0800 - 0900",
            "SUN 0800 - 0900",
        ]


class TestSessionQueries:
    """Tests for day and time lookups."""

    def test_is_happening_on(self):
        session = _session("THU 1400 - 1500")
        assert session.is_happening_on(Weekday.THURSDAY)
        assert not session.is_happening_on(Weekday.FRIDAY)

    def test_is_happening_at_includes_both_ends(self):
        session = _session("THU 1400 - 1500")
        assert session.is_happening_at(time(14, 0))
        assert session.is_happening_at(time(14, 30))
        assert session.is_happening_at(time(15, 0))
        assert not session.is_happening_at(time(15, 1))

    def test_spans(self):
        session = _session("THU 1400 - 1600")
        assert session.spans(time(14, 30), time(15, 30))
        assert not session.spans(time(13, 30), time(15, 30))


class TestClockTime:
    """Tests for HHmm parsing."""

    def test_parse_clock_time(self):
        assert parse_clock_time("0930") == time(9, 30)

    def test_parse_clock_time_reports_field(self):
        with pytest.raises(InvalidSession) as excinfo:
            parse_clock_time("930", "at")
        assert excinfo.value.field == "at"


class TestFreeSlot:
    """Tests for FreeSlot."""

    def test_format_display(self):
        slot = FreeSlot(day=Weekday.MONDAY, start=time(12, 0), end=time(14, 0))
        assert slot.format_display() == "MONDAY 12:00"
