"""Tests for period membership and per-tag aggregation."""

from datetime import datetime, timedelta, timezone

import pytest

from worklog.core.report import aggregate, report, within_period
from worklog.core.store import SessionStore
from worklog.models.period import Period
from worklog.models.session import Session

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)  # Wednesday, ISO week 20


def ts(dt: datetime) -> int:
    return int(dt.timestamp())


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestWithinPeriod:
    """Test calendar bucket membership in UTC."""

    def test_daily_same_date(self):
        assert within_period(ts(utc(2024, 5, 15, 0, 0)), Period.DAILY, NOW)
        assert within_period(ts(utc(2024, 5, 15, 23, 59, 59)), Period.DAILY, NOW)

    def test_daily_other_date(self):
        assert not within_period(ts(utc(2024, 5, 14, 23, 59, 59)), Period.DAILY, NOW)
        assert not within_period(ts(utc(2024, 5, 16, 0, 0)), Period.DAILY, NOW)

    def test_daily_uses_utc_for_aware_now(self):
        """A non-UTC 'now' is converted before comparing dates."""
        local_now = datetime(2024, 5, 15, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert within_period(ts(utc(2024, 5, 16, 4, 0)), Period.DAILY, local_now)
        assert not within_period(ts(utc(2024, 5, 15, 12, 0)), Period.DAILY, local_now)

    def test_naive_now_is_treated_as_utc(self):
        naive_now = datetime(2024, 5, 15, 23, 30)
        assert within_period(ts(utc(2024, 5, 15, 23, 0)), Period.DAILY, naive_now)
        assert not within_period(ts(utc(2024, 5, 16, 0, 30)), Period.DAILY, naive_now)

    def test_weekly_same_iso_week(self):
        monday = utc(2024, 5, 13, 0, 0)
        sunday = utc(2024, 5, 19, 23, 59)
        assert within_period(ts(monday), Period.WEEKLY, NOW)
        assert within_period(ts(sunday), Period.WEEKLY, NOW)
        assert not within_period(ts(monday - timedelta(seconds=1)), Period.WEEKLY, NOW)

    def test_weekly_spans_new_year_by_iso_year(self):
        """2020-12-31 and 2021-01-01 both belong to ISO week 2020-W53."""
        now = utc(2021, 1, 1, 9, 0)
        assert within_period(ts(utc(2020, 12, 31, 9, 0)), Period.WEEKLY, now)

    def test_weekly_same_week_number_different_year(self):
        now = utc(2020, 1, 1, 9, 0)  # 2020-W01
        assert not within_period(ts(utc(2021, 1, 6, 9, 0)), Period.WEEKLY, now)

    def test_monthly(self):
        assert within_period(ts(utc(2024, 5, 1, 0, 0)), Period.MONTHLY, NOW)
        assert within_period(ts(utc(2024, 5, 31, 23, 59)), Period.MONTHLY, NOW)
        assert not within_period(ts(utc(2024, 4, 30, 23, 59)), Period.MONTHLY, NOW)
        assert not within_period(ts(utc(2023, 5, 15, 12, 0)), Period.MONTHLY, NOW)

    def test_accepts_period_strings(self):
        assert within_period(ts(NOW), "daily", NOW)
        assert within_period(ts(NOW), "monthly", NOW)

    def test_unknown_period_never_matches(self):
        assert not within_period(ts(NOW), "yearly", NOW)


def test_aggregate_sums_completed_sessions_per_tag():
    t = ts(NOW)
    sessions = [
        Session(tag="a", start=t - 7200, end=t - 3600),
        Session(tag="b", start=t - 3000, end=t - 2000),
        Session(tag="a", start=t - 1800, end=t - 1200),
    ]

    assert aggregate(sessions, Period.DAILY, NOW) == {"a": 4200, "b": 1000}


def test_aggregate_ignores_active_session():
    t = ts(NOW)
    sessions = [
        Session(tag="a", start=t - 3600, end=t - 1800),
        Session(tag="b", start=t - 600),
    ]

    assert aggregate(sessions, Period.DAILY, NOW) == {"a": 1800}


def test_aggregate_excludes_sessions_outside_period():
    last_week = ts(NOW - timedelta(days=7))
    sessions = [Session(tag="old", start=last_week, end=last_week + 600)]

    assert aggregate(sessions, Period.DAILY, NOW) == {}
    assert aggregate(sessions, Period.WEEKLY, NOW) == {}
    assert aggregate(sessions, Period.MONTHLY, NOW) == {"old": 600}


def test_boundary_session_counted_in_both_days():
    """A session from yesterday into today credits its full duration to both."""
    session = Session(
        tag="night",
        start=ts(utc(2024, 5, 14, 23, 0)),
        end=ts(utc(2024, 5, 15, 1, 0)),
    )
    yesterday = utc(2024, 5, 14, 12, 0)
    today = utc(2024, 5, 15, 12, 0)

    assert aggregate([session], Period.DAILY, yesterday) == {"night": 7200}
    assert aggregate([session], Period.DAILY, today) == {"night": 7200}


def test_report_orders_by_descending_total():
    t = ts(NOW)
    sessions = [
        Session(tag="b", start=t, end=t + 1800),
        Session(tag="a", start=t, end=t + 3600),
    ]

    result = report(sessions, Period.DAILY, NOW)

    assert [(row.tag, row.hours) for row in result.rows] == [("a", 1.0), ("b", 0.5)]
    assert result.period is Period.DAILY
    assert result.total_hours == pytest.approx(1.5)
    assert not result.is_empty


def test_report_empty_signal():
    t = ts(NOW - timedelta(days=40))
    sessions = [
        Session(tag="old", start=t, end=t + 60),
        Session(tag="running", start=ts(NOW)),
    ]

    result = report(sessions, "monthly", NOW)

    assert result.is_empty
    assert result.rows == []


def test_report_zero_duration_row_is_not_empty():
    """A zero-length completed session still produces a row."""
    t = ts(NOW)
    result = report([Session(tag="blip", start=t, end=t)], Period.DAILY, NOW)

    assert not result.is_empty
    assert [(row.tag, row.hours) for row in result.rows] == [("blip", 0.0)]


def test_report_rejects_unknown_period():
    with pytest.raises(ValueError):
        report([], "yearly", NOW)


def test_manual_log_appears_in_daily_report(tmp_path):
    """Logging 2.5 hours shows up as ~2.5 hours in today's report."""
    store = SessionStore(tmp_path / "log.json", clock=lambda: ts(NOW))
    store.log_manual("x", 2.5)

    result = report(store.load(), Period.DAILY, NOW)

    assert result.rows[0].tag == "x"
    assert result.rows[0].hours == pytest.approx(2.5, abs=1 / 3600)
