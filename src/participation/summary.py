# ABOUTME: Converts an answer graph into per-student participation verdicts.
# ABOUTME: Also renders records as DataFrames and pads summaries with a class roster.

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional, Sequence

import pandas as pd

from src.common.errors import InvalidArgumentError
from src.common.schemas import ParticipationRecord, PostRef, ReplyRef

from .answer_graph import AnswerGraph, build_answer_graph

SUMMARY_COLUMNS = ["student_username", "distinct_peers_answered", "meets_requirement", "status"]


def validate_threshold(required_threshold: int) -> int:
    if isinstance(required_threshold, bool) or not isinstance(required_threshold, int):
        raise InvalidArgumentError(f"Required distinct peers must be an integer, got {required_threshold!r}")
    if required_threshold < 1:
        raise InvalidArgumentError("Required distinct peers must be at least 1")
    return required_threshold


def build_summary(answer_graph: AnswerGraph, required_threshold: int) -> Dict[str, ParticipationRecord]:
    """
    Emit one record per answerer in the graph.

    Students who answered nobody are not graph keys and therefore do not
    appear; callers holding the roster treat absence as zero (see ``with_roster``).
    """

    if answer_graph is None:
        raise InvalidArgumentError("Answer graph cannot be null")
    validate_threshold(required_threshold)

    summary: Dict[str, ParticipationRecord] = {}
    for username, peers in answer_graph.items():
        count = len(peers)
        summary[username] = ParticipationRecord(
            student_username=username,
            distinct_peers_answered=count,
            meets_requirement=count >= required_threshold,
        )
    return summary


def generate_summary(
    posts: Sequence[PostRef],
    replies: Sequence[ReplyRef],
    required_threshold: int,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Dict[str, ParticipationRecord]:
    """Build the answer graph and its summary in one call."""

    graph = build_answer_graph(posts, replies, start_date, end_date)
    return build_summary(graph, required_threshold)


def with_roster(summary: Dict[str, ParticipationRecord], roster: Iterable[str]) -> Dict[str, ParticipationRecord]:
    """Add a zero-count, not-meeting record for each roster student missing from the summary."""

    padded = dict(summary)
    for username in roster:
        if not username or not username.strip() or username in padded:
            continue
        padded[username] = ParticipationRecord(
            student_username=username,
            distinct_peers_answered=0,
            meets_requirement=False,
        )
    return padded


def summary_to_frame(records: Iterable[ParticipationRecord]) -> pd.DataFrame:
    """Render records as a DataFrame, preserving the order they were given in."""

    rows = [
        {
            "student_username": record.student_username,
            "distinct_peers_answered": record.distinct_peers_answered,
            "meets_requirement": record.meets_requirement,
            "status": record.status,
        }
        for record in records
    ]
    if not rows:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
