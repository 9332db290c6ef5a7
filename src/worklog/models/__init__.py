"""Data models for Worklog."""

from .period import Period
from .session import Session, SessionStatus

__all__ = ["Period", "Session", "SessionStatus"]
