# ABOUTME: Orchestrates participation analysis for the grading dashboard.
# ABOUTME: Holds threshold and date window, caches the summary, and serves ranked and drill-down queries.

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from src.common.errors import InvalidArgumentError
from src.common.schemas import DateWindow, ParticipationRecord, PostRef, ReplyRef

from .answer_graph import AnswerGraph, build_answer_graph
from .summary import build_summary, validate_threshold

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_DISTINCT_PEERS = 3

Snapshot = Tuple[Sequence[PostRef], Sequence[ReplyRef]]
SnapshotSource = Callable[[], Snapshot]


def ranking_key(record: ParticipationRecord) -> Tuple[bool, int]:
    """
    Sort key for triage: students missing the requirement first, neediest
    (lowest count) first among them; then students meeting it, most engaged first.
    """

    if record.meets_requirement:
        return True, -record.distinct_peers_answered
    return False, record.distinct_peers_answered


class ParticipationQueryService:
    """
    Facade between the analysis engine and the presentation layer.

    The cached summary is either stale (initially and after any setter) or
    fresh (after ``refresh`` or a lazy computation). Stale computations read
    ``source()`` when one is configured, else the last snapshot handed to
    ``refresh``. Not thread-safe; hosts sharing an instance must lock around calls.
    """

    def __init__(
        self,
        required_threshold: int = DEFAULT_REQUIRED_DISTINCT_PEERS,
        source: Optional[SnapshotSource] = None,
        date_window: Optional[DateWindow] = None,
    ) -> None:
        self._required_threshold = validate_threshold(required_threshold)
        self._source = source
        self._date_window = date_window or DateWindow()
        self._snapshot: Snapshot = ((), ())
        self._summary: Optional[Dict[str, ParticipationRecord]] = None

    @property
    def required_threshold(self) -> int:
        return self._required_threshold

    @property
    def date_window(self) -> DateWindow:
        return self._date_window

    @property
    def is_stale(self) -> bool:
        return self._summary is None

    def refresh(self, posts: Sequence[PostRef], replies: Sequence[ReplyRef]) -> None:
        _require_collections(posts, replies)
        snapshot = (tuple(posts), tuple(replies))
        summary = build_summary(self._graph_for(snapshot), self._required_threshold)
        self._snapshot = snapshot
        self._summary = summary
        logger.debug("Refreshed participation summary for %d students", len(summary))

    def get_summary(self) -> Dict[str, ParticipationRecord]:
        if self._summary is None:
            self._summary = build_summary(self._graph_for(self._current_snapshot()), self._required_threshold)
        return dict(self._summary)

    def get_ranked_list(self) -> List[ParticipationRecord]:
        return sorted(self.get_summary().values(), key=ranking_key)

    def count_meeting(self) -> int:
        return sum(1 for record in self.get_summary().values() if record.meets_requirement)

    def count_not_meeting(self) -> int:
        return sum(1 for record in self.get_summary().values() if not record.meets_requirement)

    def set_date_window(self, start: Optional[date] = None, end: Optional[date] = None) -> None:
        """Set the inclusive window; bare dates are widened to whole days."""

        self._date_window = DateWindow.from_dates(start, end)
        self._invalidate("date window changed")

    def clear_date_window(self) -> None:
        self._date_window = DateWindow()
        self._invalidate("date window cleared")

    def set_required_threshold(self, required_threshold: int) -> None:
        self._required_threshold = validate_threshold(required_threshold)
        self._invalidate("threshold changed")

    def get_peers_answered(self, student_username: str) -> Set[str]:
        graph = self._graph_for(self._current_snapshot())
        return set(graph.get(student_username, ()))

    def get_authored_replies(
        self,
        student_username: str,
        posts: Sequence[PostRef],
        replies: Sequence[ReplyRef],
    ) -> List[ReplyRef]:
        # Exact-case match here, unlike the case-insensitive self-reply check.
        _require_collections(posts, replies)
        return [
            reply
            for reply in replies
            if not reply.deleted
            and reply.author == student_username
            and self._date_window.contains(reply.created_at)
        ]

    def _current_snapshot(self) -> Snapshot:
        if self._source is None:
            return self._snapshot
        posts, replies = self._source()
        _require_collections(posts, replies)
        return tuple(posts), tuple(replies)

    def _graph_for(self, snapshot: Snapshot) -> AnswerGraph:
        posts, replies = snapshot
        return build_answer_graph(posts, replies, self._date_window.start, self._date_window.end)

    def _invalidate(self, reason: str) -> None:
        self._summary = None
        logger.debug("Participation summary invalidated: %s", reason)


def _require_collections(posts, replies) -> None:
    if posts is None:
        raise InvalidArgumentError("Posts list cannot be null")
    if replies is None:
        raise InvalidArgumentError("Replies list cannot be null")
