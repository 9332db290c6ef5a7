"""Errors raised by the session store."""

from pathlib import Path
from typing import Optional

from worklog.models.session import Session


class WorklogError(Exception):
    """Base class for all worklog failures reported to the user."""


class AlreadyRunningError(WorklogError):
    """A session is already active."""

    def __init__(self, session: Session):
        self.session = session
        super().__init__(
            f"Session '{session.tag}' is still running. Stop or reset it first."
        )


class NoActiveSessionError(WorklogError):
    """The operation needs an active session and there is none."""

    def __init__(self, message: str = "No running session."):
        super().__init__(message)


class InvalidHoursError(WorklogError, ValueError):
    """Manually logged hours must be a positive number."""

    def __init__(self, hours: float, message: Optional[str] = None):
        self.hours = hours
        super().__init__(message or f"Hours must be positive, got {hours}.")


class StorageError(WorklogError):
    """The log file could not be created, read or written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Cannot access log file {path}: {reason}")


class CorruptDataError(WorklogError):
    """The log file exists but does not hold a valid session list."""

    def __init__(self, path: Path, detail: Optional[str] = None):
        self.path = path
        message = f"Log file {path} is corrupt"
        if detail:
            message += f": {detail}"
        super().__init__(message)
