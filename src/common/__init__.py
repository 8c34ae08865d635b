# ABOUTME: Makes the shared common package importable across engines.
# ABOUTME: Re-exports record types and the engine error for convenience.

from .errors import InvalidArgumentError
from .schemas import DateWindow, ParticipationRecord, PostRef, ReplyRef

__all__ = [
    "DateWindow",
    "InvalidArgumentError",
    "ParticipationRecord",
    "PostRef",
    "ReplyRef",
]
