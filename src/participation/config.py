# ABOUTME: Loads participation settings (threshold and date window) from YAML.
# ABOUTME: Builds a configured query service so the CLI and hosts share one setup path.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from src.common.errors import InvalidArgumentError
from src.common.schemas import DateWindow

from .query_service import DEFAULT_REQUIRED_DISTINCT_PEERS, ParticipationQueryService, SnapshotSource
from .summary import validate_threshold


@dataclass(frozen=True)
class ParticipationConfig:
    required_distinct_peers: int = DEFAULT_REQUIRED_DISTINCT_PEERS
    window: DateWindow = field(default_factory=DateWindow)

    def build_service(self, source: Optional[SnapshotSource] = None) -> ParticipationQueryService:
        return ParticipationQueryService(
            required_threshold=self.required_distinct_peers,
            source=source,
            date_window=self.window,
        )


def load_config(config_path: Path) -> ParticipationConfig:
    """Programmatic entrypoint mirrored by the CLI's --config option."""

    with open(config_path) as f:
        cfg = yaml.safe_load(f) or {}
    return parse_config(cfg)


def parse_config(cfg: Mapping[str, Any]) -> ParticipationConfig:
    if not isinstance(cfg, Mapping):
        raise InvalidArgumentError("Participation config must be a mapping")
    section = cfg.get("participation") or {}

    threshold = section.get("required_distinct_peers", DEFAULT_REQUIRED_DISTINCT_PEERS)
    validate_threshold(threshold)

    window_cfg = section.get("window") or {}
    window = DateWindow.from_dates(
        parse_date_bound(window_cfg.get("start"), "start"),
        parse_date_bound(window_cfg.get("end"), "end"),
    )
    return ParticipationConfig(required_distinct_peers=threshold, window=window)
def parse_date_bound(value: Any, name: str = "bound") -> Optional[date]:
    """
    Accept YAML dates/datetimes or ISO8601 strings. A string without a time
    component comes back as a ``date`` so it is widened to a whole day.
    Offset-aware datetimes come back as naive UTC, matching reply timestamps.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            if "T" in text or " " in text:
                return _naive_utc(datetime.fromisoformat(text))
            return date.fromisoformat(text)
        except ValueError as exc:
            raise InvalidArgumentError(f"Invalid window {name} '{value}'. Expected ISO8601 date or datetime.") from exc
    raise InvalidArgumentError(f"Invalid window {name} {value!r}. Expected ISO8601 date or datetime.")


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
