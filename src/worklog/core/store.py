"""Session store backed by a single JSON file."""

import contextlib
import json
import logging
import math
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from worklog.core.exceptions import (
    AlreadyRunningError,
    CorruptDataError,
    InvalidHoursError,
    NoActiveSessionError,
    StorageError,
)
from worklog.models.session import MIN_TIMESTAMP, Session, SessionStatus

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600


def utc_now() -> int:
    """Current time as whole UTC epoch seconds."""
    return int(datetime.now(timezone.utc).timestamp())


class SessionStore:
    """Owns the durable list of sessions and the active-session state machine.

    Every mutating operation loads the file, changes the list in memory and
    writes it back with a single :meth:`save`, so a failed operation never
    leaves a partial write behind.
    """

    def __init__(self, log_file: Path, clock: Callable[[], int] = utc_now):
        self.log_file = Path(log_file)
        self.clock = clock

    def load(self) -> List[Session]:
        """Load sessions from the log file.

        A missing or blank file is an empty log. Anything else that does not
        parse as a list of sessions raises :class:`CorruptDataError`.
        """
        try:
            raw = self.log_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No log file at %s yet", self.log_file)
            return []
        except OSError as e:
            raise StorageError(self.log_file, e.strerror or str(e)) from e

        if not raw.strip():
            return []

        try:
            sessions_data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(
                self.log_file, f"invalid JSON at line {e.lineno}: {e.msg}"
            ) from e

        if not isinstance(sessions_data, list):
            raise CorruptDataError(self.log_file, "expected a JSON array of sessions")

        try:
            sessions = [Session.model_validate(data) for data in sessions_data]
        except ValidationError as e:
            raise CorruptDataError(
                self.log_file, f"{e.error_count()} invalid session field(s)"
            ) from e

        logger.debug("Loaded %d sessions from %s", len(sessions), self.log_file)
        return sessions

    def save(self, sessions: List[Session]) -> None:
        """Replace the log file with ``sessions``.

        The data goes to a temporary file in the same directory first and is
        moved over the old file only once fully flushed to disk.
        """
        sessions_data = [session.model_dump() for session in sessions]
        payload = json.dumps(sessions_data, indent=2) + "\n"
        directory = self.log_file.parent

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.log_file.name}.", suffix=".tmp", dir=directory
            )
        except OSError as e:
            raise StorageError(self.log_file, e.strerror or str(e)) from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.log_file)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise StorageError(self.log_file, e.strerror or str(e)) from e

        logger.debug("Saved %d sessions to %s", len(sessions), self.log_file)

    def active_session(
        self, sessions: Optional[List[Session]] = None
    ) -> Optional[Session]:
        """Get the running session, if any."""
        if sessions is None:
            sessions = self.load()
        return next((s for s in sessions if s.is_active), None)

    def start(self, tag: str) -> Session:
        """Start a new session tagged ``tag``."""
        sessions = self.load()

        running = self.active_session(sessions)
        if running is not None:
            raise AlreadyRunningError(running)

        session = Session(tag=tag, start=self.clock())
        sessions.append(session)
        self.save(sessions)

        logger.debug("Started session %r at %d", tag, session.start)
        return session

    def stop(self) -> Session:
        """Stop the running session and keep it as completed."""
        sessions = self.load()

        session = self.active_session(sessions)
        if session is None:
            raise NoActiveSessionError()

        session.end = self.clock()
        self.save(sessions)

        logger.debug("Stopped session %r after %ds", session.tag, session.duration)
        return session

    def status(self) -> SessionStatus:
        """Describe the running session without changing anything."""
        session = self.active_session()
        if session is None:
            return SessionStatus()
        return SessionStatus(session=session, elapsed=session.elapsed(self.clock()))

    def reset(self) -> Session:
        """Discard the running session without logging it."""
        sessions = self.load()

        position = next(
            (i for i, s in enumerate(sessions) if s.is_active), None
        )
        if position is None:
            raise NoActiveSessionError("No active session to reset.")

        session = sessions.pop(position)
        self.save(sessions)

        logger.debug("Discarded session %r", session.tag)
        return session

    def log_manual(self, tag: str, hours: float) -> Session:
        """Record ``hours`` of completed work for ``tag`` ending now."""
        if not math.isfinite(hours) or hours <= 0:
            raise InvalidHoursError(hours)

        try:
            seconds = round(hours * SECONDS_PER_HOUR)
        except OverflowError as e:
            raise InvalidHoursError(hours, f"Hours value {hours} is too large.") from e

        now = self.clock()
        if now - seconds < MIN_TIMESTAMP:
            raise InvalidHoursError(
                hours, f"Logging {hours} hours would start before the Unix epoch."
            )

        sessions = self.load()

        session = Session(tag=tag, start=now - seconds, end=now)
        sessions.append(session)
        self.save(sessions)

        logger.debug("Logged %.2fh for %r", hours, tag)
        return session
