# ABOUTME: Defines canonical data structures shared by the participation engine.
# ABOUTME: Centralizes post, reply, participation record, and date window definitions.

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from .errors import InvalidArgumentError


@dataclass(frozen=True)
class PostRef:
    """Discussion post as seen by the engine: identity, author, and soft-delete flag."""

    post_id: str
    author: str
    deleted: bool = False


@dataclass(frozen=True)
class ReplyRef:
    """Reply to a post, linked by post identifier."""

    reply_id: str
    post_id: str
    author: str
    created_at: datetime
    deleted: bool = False
    content: str = ""


@dataclass(frozen=True, eq=False)
class ParticipationRecord:
    """
    One student's participation verdict.

    Equality and hashing use ``student_username`` only, so two records for the
    same student compare equal even when their counts differ.
    """

    student_username: str
    distinct_peers_answered: int
    meets_requirement: bool

    def __post_init__(self) -> None:
        if self.student_username is None or not str(self.student_username).strip():
            raise InvalidArgumentError("Student username cannot be null or empty")
        if self.distinct_peers_answered < 0:
            raise InvalidArgumentError("Distinct peers answered cannot be negative")

    @property
    def status(self) -> str:
        return "MEETS" if self.meets_requirement else "NEEDS MORE"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ParticipationRecord):
            return NotImplemented
        return self.student_username == other.student_username

    def __hash__(self) -> int:
        return hash(self.student_username)

    def __str__(self) -> str:
        return (
            f"{self.student_username:<20} | Answered: {self.distinct_peers_answered:2d} distinct students"
            f" | Status: {self.status}"
        )


@dataclass(frozen=True)
class DateWindow:
    """Inclusive [start, end] timestamp window; a missing bound is unbounded on that side."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @classmethod
    def from_dates(cls, start_date: Optional[date], end_date: Optional[date]) -> "DateWindow":
        """
        Widen calendar dates to whole days: start-of-day for ``start_date`` and
        end-of-day for ``end_date``. Datetimes pass through unchanged.
        """

        return cls(start=_day_start(start_date), end=_day_end(end_date))

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, timestamp: datetime) -> bool:
        if self.start is not None and timestamp < self.start:
            return False
        if self.end is not None and timestamp > self.end:
            return False
        return True


def _day_start(value: Optional[date]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _day_end(value: Optional[date]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max)
