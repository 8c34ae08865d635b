# ABOUTME: Groups the participation analysis engine used for discussion grading.
# ABOUTME: Re-exports graph and summary builders, the query service, and config loading.

from .answer_graph import AnswerGraph, answer_graph_to_frame, build_answer_graph
from .config import ParticipationConfig, load_config
from .query_service import ParticipationQueryService, ranking_key
from .summary import build_summary, generate_summary, summary_to_frame, with_roster

__all__ = [
    "AnswerGraph",
    "answer_graph_to_frame",
    "build_answer_graph",
    "ParticipationConfig",
    "load_config",
    "ParticipationQueryService",
    "ranking_key",
    "build_summary",
    "generate_summary",
    "summary_to_frame",
    "with_roster",
]
