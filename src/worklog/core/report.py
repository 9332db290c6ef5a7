"""Aggregate completed sessions per tag over calendar periods."""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel

from worklog.models.period import Period
from worklog.models.session import Session

logger = logging.getLogger(__name__)


class ReportRow(BaseModel):
    """Total hours for one tag."""

    tag: str
    hours: float


class Report(BaseModel):
    """Per-tag totals for a period, largest first."""

    period: Period
    rows: List[ReportRow] = []

    @property
    def is_empty(self) -> bool:
        """True when no tag has any aggregated time."""
        return not self.rows

    @property
    def total_hours(self) -> float:
        return sum(row.hours for row in self.rows)


def _to_utc(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def within_period(
    timestamp: int,
    period: Union[Period, str],
    now: Optional[datetime] = None,
) -> bool:
    """Check whether ``timestamp`` falls in the same period as ``now`` (UTC).

    Weekly membership compares both ISO week number and ISO week-year, so
    the days around New Year group with the correct week. A naive ``now``
    is taken to be UTC already.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)
    moment = _to_utc(timestamp)

    try:
        period = Period(period)
    except ValueError:
        return False

    if period is Period.DAILY:
        return moment.date() == now.date()
    if period is Period.WEEKLY:
        year, week, _ = moment.isocalendar()
        now_year, now_week, _ = now.isocalendar()
        return year == now_year and week == now_week
    return moment.year == now.year and moment.month == now.month


def aggregate(
    sessions: Iterable[Session],
    period: Union[Period, str],
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """Sum completed session seconds per tag for the period.

    A session counts if either its start or its end lies in the period, so
    one that crosses a boundary is credited to both sides in full.
    """
    totals: Dict[str, int] = {}
    for session in sessions:
        if session.end is None:
            continue
        if within_period(session.start, period, now) or within_period(
            session.end, period, now
        ):
            totals[session.tag] = totals.get(session.tag, 0) + session.duration
    return totals


def report(
    sessions: Iterable[Session],
    period: Union[Period, str],
    now: Optional[datetime] = None,
) -> Report:
    """Build the per-tag hour totals for ``period``, largest first."""
    period = Period(period)
    totals = aggregate(sessions, period, now)
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)

    logger.debug("%s report covers %d tags", period.value, len(ordered))
    return Report(
        period=period,
        rows=[ReportRow(tag=tag, hours=seconds / 3600.0) for tag, seconds in ordered],
    )
