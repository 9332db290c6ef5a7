"""Session model for tracked work intervals."""

from typing import Optional

from pydantic import BaseModel, Field

# Range of epoch seconds a UTC datetime can represent, from the epoch on.
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = 253402300799  # 9999-12-31T23:59:59Z


class Session(BaseModel):
    """Represents one tracked activity interval for a tag."""

    tag: str
    start: int = Field(ge=MIN_TIMESTAMP, le=MAX_TIMESTAMP)  # UTC epoch seconds
    end: Optional[int] = Field(default=None, ge=MIN_TIMESTAMP, le=MAX_TIMESTAMP)

    model_config = {"strict": True}

    @property
    def is_active(self) -> bool:
        """Check if session is currently running."""
        return self.end is None

    @property
    def duration(self) -> Optional[int]:
        """Get session duration in seconds."""
        if self.end is None:
            return None
        return self.end - self.start

    def elapsed(self, now: int) -> int:
        """Seconds from start to end, or to ``now`` while running."""
        if self.end is None:
            return now - self.start
        return self.end - self.start


class SessionStatus(BaseModel):
    """Result of a status query."""

    session: Optional[Session] = None
    elapsed: int = 0

    @property
    def is_active(self) -> bool:
        return self.session is not None
