# ABOUTME: Converts tabular post and reply exports into engine record types.
# ABOUTME: Reads CSV or parquet files and validates the columns each record needs.

from pathlib import Path
from typing import List, Sequence

import pandas as pd

from src.common.errors import InvalidArgumentError
from src.common.schemas import PostRef, ReplyRef

POST_COLUMNS = ("post_id", "author")
REPLY_COLUMNS = ("reply_id", "post_id", "author", "created_at")

_TRUE_STRINGS = {"true", "1", "yes", "y", "t"}
_FALSE_STRINGS = {"false", "0", "no", "n", "f", ""}


def load_table(path: Path) -> pd.DataFrame:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".parquet":
        return pd.read_parquet(path)
    if suffix == ".csv":
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    raise InvalidArgumentError(f"Unsupported table format '{path.suffix}'. Expected .csv or .parquet.")


def load_roster(path: Path) -> List[str]:
    """One username per line; blank lines and '#' comments are ignored."""

    lines = Path(path).read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def posts_from_frame(df: pd.DataFrame) -> List[PostRef]:
    _require_columns(df, POST_COLUMNS, "posts")
    deleted = _deleted_flags(df)
    return [
        PostRef(post_id=str(post_id), author=str(author), deleted=flag)
        for post_id, author, flag in zip(df["post_id"], df["author"], deleted)
    ]


def replies_from_frame(df: pd.DataFrame) -> List[ReplyRef]:
    _require_columns(df, REPLY_COLUMNS, "replies")
    deleted = _deleted_flags(df)
    timestamps = pd.to_datetime(df["created_at"])
    # Window bounds are naive, so aware timestamps are compared as naive UTC.
    if timestamps.dt.tz is not None:
        timestamps = timestamps.dt.tz_convert("UTC").dt.tz_localize(None)
    contents = df["content"] if "content" in df.columns else [""] * len(df)

    replies: List[ReplyRef] = []
    for reply_id, post_id, author, ts, flag, content in zip(
        df["reply_id"], df["post_id"], df["author"], timestamps, deleted, contents
    ):
        replies.append(
            ReplyRef(
                reply_id=str(reply_id),
                post_id=str(post_id),
                author=str(author),
                created_at=ts.to_pydatetime(),
                deleted=flag,
                content="" if pd.isna(content) else str(content),
            )
        )
    return replies


def _require_columns(df: pd.DataFrame, required: Sequence[str], label: str) -> None:
    if df is None:
        raise InvalidArgumentError(f"{label.capitalize()} table cannot be null")
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise InvalidArgumentError(f"{label.capitalize()} table is missing columns: {', '.join(missing)}")


def _deleted_flags(df: pd.DataFrame) -> List[bool]:
    if "deleted" not in df.columns:
        return [False] * len(df)
    return [_parse_flag(value) for value in df["deleted"]]


def _parse_flag(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
        raise InvalidArgumentError(f"Unrecognized deleted flag '{value}'")
    if pd.isna(value):
        return False
    return bool(value)
