# ABOUTME: Folds discussion posts and replies into an answerer -> askers graph.
# ABOUTME: Applies soft-delete, self-reply, and inclusive date window exclusions.

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Optional, Sequence, Set

import pandas as pd

from src.common.errors import InvalidArgumentError
from src.common.schemas import DateWindow, PostRef, ReplyRef

logger = logging.getLogger(__name__)

AnswerGraph = Dict[str, Set[str]]


def build_answer_graph(
    posts: Sequence[PostRef],
    replies: Sequence[ReplyRef],
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> AnswerGraph:
    """
    Map each answerer to the distinct post authors they replied to.

    Steps:
    - Index post_id -> author over non-deleted posts only.
    - Drop deleted replies and replies outside [start_date, end_date].
    - Drop replies whose post is deleted or unknown.
    - Drop self-replies, compared case-insensitively.

    Graph keys and peer sets use exact string identity, so every key maps to a
    non-empty set and repeated replies to the same asker count once.
    """

    if posts is None:
        raise InvalidArgumentError("Posts list cannot be null")
    if replies is None:
        raise InvalidArgumentError("Replies list cannot be null")

    post_authors = {post.post_id: post.author for post in posts if not post.deleted}
    window = DateWindow(start=start_date, end=end_date)

    graph: AnswerGraph = {}
    for reply in replies:
        if reply.deleted:
            continue
        if not window.contains(reply.created_at):
            continue

        asker = post_authors.get(reply.post_id)
        if asker is None:
            continue

        answerer = reply.author
        if answerer.casefold() == asker.casefold():
            continue

        graph.setdefault(answerer, set()).add(asker)

    logger.debug(
        "Built answer graph: %d answerers from %d posts and %d replies", len(graph), len(posts), len(replies)
    )
    return graph


def answer_graph_to_frame(graph: AnswerGraph) -> pd.DataFrame:
    """Flatten the graph into one (answerer, asker) row per edge, sorted for stable output."""

    rows = [
        {"answerer": answerer, "asker": asker}
        for answerer, askers in graph.items()
        for asker in askers
    ]
    if not rows:
        return pd.DataFrame(columns=["answerer", "asker"])

    return pd.DataFrame(rows).sort_values(["answerer", "asker"], kind="mergesort").reset_index(drop=True)
