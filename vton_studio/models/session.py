"""Run state tracking for a single try-on session."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, computed_field

from ..errors import TryOnError, TryOnInProgressError


class RunStatus(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TryOnSession(BaseModel):
    """In-memory state of the caller's current try-on run.

    Idle -> Requesting -> {Succeeded | Failed}. Starting a new run clears
    the previous images and error, and only one run may be outstanding.
    """

    status: RunStatus = RunStatus.IDLE
    images: list[str] = Field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None

    started_at: datetime | None = None
    completed_at: datetime | None = None

    @computed_field
    @property
    def in_flight(self) -> bool:
        return self.status == RunStatus.REQUESTING

    def begin(self) -> None:
        """Enter the requesting state."""
        if self.in_flight:
            raise TryOnInProgressError()
        self.status = RunStatus.REQUESTING
        self.images = []
        self.error = None
        self.error_kind = None
        self.started_at = datetime.now()
        self.completed_at = None

    def succeed(self, images: list[str]) -> None:
        self.status = RunStatus.SUCCEEDED
        self.images = list(images)
        self.completed_at = datetime.now()

    def fail(self, error: TryOnError) -> None:
        self.status = RunStatus.FAILED
        self.images = []
        self.error = error.message
        self.error_kind = error.kind
        self.completed_at = datetime.now()

    def reset(self) -> None:
        """Return to idle, discarding any results."""
        if self.in_flight:
            raise TryOnInProgressError()
        self.status = RunStatus.IDLE
        self.images = []
        self.error = None
        self.error_kind = None
        self.started_at = None
        self.completed_at = None
