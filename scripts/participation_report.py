# ABOUTME: Provides a CLI that ranks students by distinct classmates answered in discussions.
# ABOUTME: Reads post/reply exports, applies the configured threshold and window, and prints drill-downs.

import logging
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from src.common.errors import InvalidArgumentError
from src.participation.adapters import load_roster, load_table, posts_from_frame, replies_from_frame
from src.participation.answer_graph import answer_graph_to_frame
from src.participation.config import ParticipationConfig, load_config, parse_date_bound
from src.participation.query_service import ParticipationQueryService, ranking_key
from src.participation.summary import summary_to_frame, with_roster

console = Console()
app = typer.Typer(help="Summarize discussion participation by distinct classmates answered.")


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )


def _build_service(
    posts_path: Path,
    replies_path: Path,
    config: Optional[Path],
    threshold: Optional[int],
    start: Optional[str],
    end: Optional[str],
) -> Tuple[ParticipationQueryService, list, list]:
    for path in (posts_path, replies_path):
        if not path.exists():
            raise InvalidArgumentError(f"Missing input table at {path}")
    if config is not None and not config.exists():
        raise InvalidArgumentError(f"Missing participation config at {config}")

    cfg = load_config(config) if config is not None else ParticipationConfig()
    service = cfg.build_service()
    if threshold is not None:
        service.set_required_threshold(threshold)
    if start is not None or end is not None:
        service.set_date_window(
            parse_date_bound(start, "start") if start is not None else cfg.window.start,
            parse_date_bound(end, "end") if end is not None else cfg.window.end,
        )

    posts = posts_from_frame(load_table(posts_path))
    replies = replies_from_frame(load_table(replies_path))
    service.refresh(posts, replies)
    return service, posts, replies


def _write_frame(frame: pd.DataFrame, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    if output.suffix.lower() == ".parquet":
        frame.to_parquet(output, index=False)
    else:
        frame.to_csv(output, index=False)
    console.print(f"[bold]Saved {len(frame):,} rows to {output}[/bold]")


def _window_label(service: ParticipationQueryService) -> str:
    window = service.date_window
    if window.is_unbounded:
        return "all time"
    start = window.start.isoformat(sep=" ") if window.start else "…"
    end = window.end.isoformat(sep=" ") if window.end else "…"
    return f"{start} → {end}"


@app.command()
def summary(
    posts_path: Path = typer.Option(..., "--posts", help="CSV or parquet export of posts."),
    replies_path: Path = typer.Option(..., "--replies", help="CSV or parquet export of replies."),
    config: Optional[Path] = typer.Option(None, "--config", help="Participation config YAML."),
    threshold: Optional[int] = typer.Option(None, "--threshold", help="Override required distinct classmates."),
    start: Optional[str] = typer.Option(None, "--start", help="Inclusive window start (ISO8601 date or datetime)."),
    end: Optional[str] = typer.Option(None, "--end", help="Inclusive window end (ISO8601 date or datetime)."),
    roster: Optional[Path] = typer.Option(None, "--roster", help="Optional roster file, one username per line."),
    output: Optional[Path] = typer.Option(None, "--output", help="Optional CSV or parquet path for the ranked table."),
    verbose: bool = typer.Option(False, "--verbose", help="Log engine debug output."),
) -> None:
    """
    Print the triage worklist: students missing the requirement first, neediest first.
    """
    _configure_logging(verbose)
    try:
        service, _, _ = _build_service(posts_path, replies_path, config, threshold, start, end)
        records = service.get_summary()
        if roster is not None:
            if not roster.exists():
                raise InvalidArgumentError(f"Missing roster file at {roster}")
            records = with_roster(records, load_roster(roster))
    except InvalidArgumentError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    ranked = sorted(records.values(), key=ranking_key)
    meeting = sum(1 for record in ranked if record.meets_requirement)

    console.rule("[bold blue]Discussion Participation[/bold blue]")
    console.print(f"[bold]Required classmates:[/] {service.required_threshold}")
    console.print(f"[bold]Window:[/] {_window_label(service)}")
    console.print(f"[bold]Meeting:[/] {meeting}   [bold]Needs more:[/] {len(ranked) - meeting}")
    console.print()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Student")
    table.add_column("Classmates Answered", justify="right")
    table.add_column("Status")
    for record in ranked:
        color = "green" if record.meets_requirement else "red"
        table.add_row(
            record.student_username,
            str(record.distinct_peers_answered),
            f"[{color}]{record.status}[/{color}]",
        )
    console.print(table)

    if output is not None:
        _write_frame(summary_to_frame(ranked), output)


@app.command("drill-down")
def drill_down(
    student: str = typer.Option(..., "--student", help="Username to inspect (exact case)."),
    posts_path: Path = typer.Option(..., "--posts", help="CSV or parquet export of posts."),
    replies_path: Path = typer.Option(..., "--replies", help="CSV or parquet export of replies."),
    config: Optional[Path] = typer.Option(None, "--config", help="Participation config YAML."),
    start: Optional[str] = typer.Option(None, "--start", help="Inclusive window start (ISO8601 date or datetime)."),
    end: Optional[str] = typer.Option(None, "--end", help="Inclusive window end (ISO8601 date or datetime)."),
    output: Optional[Path] = typer.Option(None, "--output", help="Optional CSV or parquet path for the student's answerer/asker edges."),
    verbose: bool = typer.Option(False, "--verbose", help="Log engine debug output."),
) -> None:
    """
    Show which classmates a student answered and the replies they wrote.
    """
    _configure_logging(verbose)
    try:
        service, posts, replies = _build_service(posts_path, replies_path, config, None, start, end)
        peers = service.get_peers_answered(student)
        authored = service.get_authored_replies(student, posts, replies)
    except InvalidArgumentError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    console.rule(f"[bold blue]{student}[/bold blue]")
    console.print(f"[bold]Window:[/] {_window_label(service)}")
    if peers:
        console.print(f"[bold green]Classmates answered ({len(peers)}):[/] {', '.join(sorted(peers))}")
    else:
        console.print("[yellow]No classmates answered in this window.[/yellow]")
    console.print()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Reply ID")
    table.add_column("Post ID")
    table.add_column("Created")
    table.add_column("Content")
    for reply in authored:
        preview = reply.content if len(reply.content) <= 150 else reply.content[:147] + "..."
        table.add_row(reply.reply_id, reply.post_id, reply.created_at.isoformat(sep=" "), preview)
    console.print(table)

    if output is not None:
        edges = {student: peers} if peers else {}
        _write_frame(answer_graph_to_frame(edges), output)


if __name__ == "__main__":
    app()
