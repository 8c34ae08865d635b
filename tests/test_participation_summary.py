# ABOUTME: Tests conversion of answer graphs into participation verdicts.
# ABOUTME: Ensures threshold classification, roster padding, and tabular output.

from datetime import datetime

import pytest

from src.common.errors import InvalidArgumentError
from src.common.schemas import ParticipationRecord, PostRef, ReplyRef
from src.participation.summary import build_summary, generate_summary, summary_to_frame, with_roster


def test_build_summary_counts_distinct_peers():
    summary = build_summary({"bob": {"alice", "carol"}, "dave": {"alice"}}, required_threshold=2)

    assert summary["bob"].distinct_peers_answered == 2
    assert summary["bob"].meets_requirement is True
    assert summary["dave"].distinct_peers_answered == 1
    assert summary["dave"].meets_requirement is False


def test_build_summary_boundary_counts():
    graph = {"two": {"a", "b"}, "three": {"a", "b", "c"}, "four": {"a", "b", "c", "d"}}
    summary = build_summary(graph, required_threshold=3)
    assert [summary[name].meets_requirement for name in ("two", "three", "four")] == [False, True, True]


def test_raising_threshold_only_removes_passes():
    graph = {"a": {"x"}, "b": {"x", "y"}, "c": {"x", "y", "z"}}
    low = build_summary(graph, required_threshold=1)
    high = build_summary(graph, required_threshold=3)

    for name in graph:
        if high[name].meets_requirement:
            assert low[name].meets_requirement


def test_build_summary_omits_silent_students():
    assert build_summary({}, required_threshold=3) == {}


def test_build_summary_rejects_missing_graph():
    with pytest.raises(InvalidArgumentError):
        build_summary(None, required_threshold=3)


@pytest.mark.parametrize("threshold", [0, -2, True, 2.5])
def test_build_summary_rejects_bad_threshold(threshold):
    with pytest.raises(InvalidArgumentError):
        build_summary({"bob": {"alice"}}, required_threshold=threshold)


def test_generate_summary_combines_graph_and_summary():
    posts = [PostRef("P1", "alice"), PostRef("P2", "carol")]
    replies = [
        ReplyRef("R1", "P1", "bob", datetime(2025, 1, 1)),
        ReplyRef("R2", "P2", "bob", datetime(2025, 1, 5)),
    ]

    summary = generate_summary(posts, replies, 2, end_date=datetime(2025, 1, 2))

    assert summary["bob"].distinct_peers_answered == 1
    assert summary["bob"].meets_requirement is False


def test_with_roster_adds_zero_rows_without_touching_input():
    summary = {"bob": ParticipationRecord("bob", 3, True)}

    padded = with_roster(summary, ["bob", "alice", "", "carol"])

    assert list(padded) == ["bob", "alice", "carol"]
    assert padded["alice"].distinct_peers_answered == 0
    assert padded["alice"].meets_requirement is False
    assert padded["bob"].distinct_peers_answered == 3
    assert list(summary) == ["bob"]


def test_summary_to_frame_preserves_order():
    records = [ParticipationRecord("zed", 0, False), ParticipationRecord("amy", 4, True)]

    frame = summary_to_frame(records)

    assert frame["student_username"].tolist() == ["zed", "amy"]
    assert frame["status"].tolist() == ["NEEDS MORE", "MEETS"]


def test_summary_to_frame_empty():
    frame = summary_to_frame([])
    assert frame.empty
    assert "meets_requirement" in frame.columns
