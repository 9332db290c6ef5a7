"""Reporting periods."""

from enum import Enum


class Period(str, Enum):
    """Calendar bucket used to filter sessions for a report."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
