"""Typer CLI entrypoint for the release tracker."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Sequence

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigRepository, ScheduleConfig, ScheduleType, SourceConfig, SourceKind
from .engine import StoreState, TrackedItem
from .errors import TrackerError
from .logging_conf import available_source_logs, configure_logging, log_path, tail_log
from .orchestrator import Orchestrator, ScanReport, status_breakdown
from .scheduler import APSchedulerAdapter

REPORT_STATUS_ORDER = (
    "public beta",
    "private beta",
    "developer preview",
    "early access",
    "now live",
    "live",
    "sunset",
    "breaking change",
    "update",
)

app = typer.Typer(
    help="Track product-change announcements across release sources.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
log_app = typer.Typer(
    name="log",
    help="Inspect log files.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    orchestrator: Orchestrator


def build_state(verbose: bool) -> AppState:
    configure_logging(verbose=verbose)
    repository = ConfigRepository()
    orchestrator = Orchestrator(config_repository=repository)
    return AppState(repository=repository, orchestrator=orchestrator)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _fail(exc: TrackerError) -> None:
    console.print(f"Error: {exc}", style="red")
    raise typer.Exit(code=1)


def _format_schedule(schedule: ScheduleConfig) -> str:
    data = schedule.value
    label = schedule.type.value
    if data in (None, "", [], {}):
        return label
    if schedule.type is ScheduleType.CRON:
        return f"cron ({data})"
    if schedule.type is ScheduleType.INTERVAL:
        return f"interval ({data})"
    return f"{label} ({data})"


def _render_sources_table(sources: Sequence[SourceConfig]) -> Table:
    table = Table(title=f"Sources · {len(sources)} configured", box=box.SIMPLE_HEAD)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Display name")
    table.add_column("Kind", style="magenta")
    table.add_column("Layout", style="green")
    table.add_column("Enabled", style="yellow")
    table.add_column("URL", overflow="fold")
    for source in sources:
        layout = source.layout.value if source.kind is SourceKind.DOCUMENT else "-"
        table.add_row(
            source.name,
            source.label,
            source.kind.value,
            layout,
            "yes" if source.enabled else "no",
            source.url,
        )
    return table


def _render_scan_summary(report: ScanReport) -> Table:
    counts = report.changes.counts()
    table = Table(title="Scan summary", box=box.SIMPLE_HEAD, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("New", str(counts["new"]))
    table.add_row("Status changed", str(counts["status_changed"]))
    table.add_row("Updated", str(counts["updated"]))
    table.add_row("Items found", str(report.items_found))
    table.add_row("Total tracked", str(report.total_tracked))
    table.add_row("Scans completed", str(report.scan_count))
    table.add_row("Empty sources", ", ".join(report.empty_sources) or "-")
    table.add_row("Failed sources", ", ".join(report.failed_sources) or "-")
    return table


def _render_changes(report: ScanReport) -> Iterable[Table]:
    if report.changes.new:
        table = Table(title=f"New ({len(report.changes.new)})", box=box.SIMPLE_HEAD)
        table.add_column("Title", style="cyan", overflow="fold")
        table.add_column("Status", style="magenta")
        table.add_column("URL", overflow="fold")
        for candidate in report.changes.new:
            table.add_row(candidate.title, candidate.status, candidate.source_url)
        yield table
    if report.changes.status_changed:
        table = Table(
            title=f"Status changes ({len(report.changes.status_changed)})", box=box.SIMPLE_HEAD
        )
        table.add_column("Title", style="cyan", overflow="fold")
        table.add_column("Transition", style="magenta")
        table.add_column("URL", overflow="fold")
        for transition in report.changes.status_changed:
            table.add_row(
                transition.candidate.title,
                f"{transition.previous_status} -> {transition.candidate.status}",
                transition.candidate.source_url,
            )
        yield table


def _ordered_statuses(items: Iterable[TrackedItem]) -> list[str]:
    present = {item.status for item in items}
    ordered = [status for status in REPORT_STATUS_ORDER if status in present]
    return ordered + sorted(present.difference(ordered))


def _render_items_table(status: str, items: Sequence[TrackedItem], now: datetime) -> Table:
    table = Table(title=f"{status.upper()} ({len(items)})", box=box.SIMPLE_HEAD)
    table.add_column("Title", style="cyan", overflow="fold")
    table.add_column("Categories", style="magenta")
    table.add_column("Tracked", style="yellow", justify="right")
    table.add_column("URL", overflow="fold")
    for item in sorted(items, key=lambda entry: entry.last_seen, reverse=True):
        age = (now - item.first_seen).days
        table.add_row(item.title, ", ".join(item.categories), f"{age}d", item.source_url)
    return table


def _state_payload(state: StoreState, status: Optional[str]) -> dict:
    items = [item for item in state.items.values() if status is None or item.status == status]
    return {
        "generated": datetime.now(timezone.utc).isoformat(),
        "total_tracked": len(state.items),
        "scan_count": state.scan_count,
        "last_scan": state.last_scan.isoformat() if state.last_scan else None,
        "by_status": [[name, count] for name, count in status_breakdown(state)],
        "items": [item.model_dump(mode="json") for item in items],
    }


app.add_typer(log_app, name="log", help="List or tail log files.")


@app.callback()
def main(
    ctx: typer.Context, verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging.")
) -> None:
    ctx.obj = build_state(verbose)


@app.command("scan", help="Run one scan over every enabled source.")
def scan(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the structured report."),
    quiet: bool = typer.Option(False, "--quiet", help="Only print the summary line."),
) -> None:
    state = _get_state(ctx)
    try:
        report = state.orchestrator.run_scan()
    except TrackerError as exc:
        _fail(exc)
        return
    if as_json:
        typer.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
        return
    if not quiet:
        console.print(_render_scan_summary(report))
        for table in _render_changes(report):
            console.print(table)
        if report.changes.is_empty:
            console.print("No changes since last scan.", style="dim")
    counts = report.changes.counts()
    console.print(
        f"Scan complete. {counts['new']} new, {counts['status_changed']} changed, "
        f"{report.total_tracked} total tracked.",
        style="green",
    )


@app.command("report", help="Show tracked items without scanning.")
def report(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the structured report."),
    status: Optional[str] = typer.Option(None, "--status", help="Only show items with this status."),
) -> None:
    state = _get_state(ctx)
    try:
        store_state = state.orchestrator.current_state()
    except TrackerError as exc:
        _fail(exc)
        return
    if as_json:
        typer.echo(json.dumps(_state_payload(store_state, status), ensure_ascii=False, indent=2))
        return

    last_scan = store_state.last_scan.isoformat() if store_state.last_scan else "never"
    console.print(
        f"Total tracked: {len(store_state.items)} · Scans completed: {store_state.scan_count} "
        f"· Last scan: {last_scan}",
        style="cyan",
    )
    items = [item for item in store_state.items.values() if status is None or item.status == status]
    if not items:
        console.print("No tracked items.", style="dim")
        return
    now = datetime.now(timezone.utc)
    for name in _ordered_statuses(items):
        group = [item for item in items if item.status == name]
        console.print(_render_items_table(name, group, now))


@app.command("history", help="Show scan snapshots for a day, or list recorded days.")
def history(
    ctx: typer.Context,
    day: Optional[str] = typer.Argument(None, help="Day as YYYY-MM-DD (defaults to today)."),
    as_json: bool = typer.Option(False, "--json", help="Print raw snapshots."),
    list_days: bool = typer.Option(False, "--list", help="List days with recorded scans."),
) -> None:
    state = _get_state(ctx)
    log = state.orchestrator.history
    if list_days:
        days = log.list_days()
        if not days:
            console.print("No scan history yet.", style="dim")
            return
        for recorded in days:
            console.print(recorded.isoformat())
        return

    try:
        target = date.fromisoformat(day) if day else datetime.now(timezone.utc).date()
    except ValueError as exc:
        raise typer.BadParameter("Day must be formatted as YYYY-MM-DD.") from exc
    try:
        snapshots = log.read(target)
    except TrackerError as exc:
        _fail(exc)
        return
    if as_json:
        typer.echo(json.dumps(snapshots, ensure_ascii=False, indent=2))
        return
    if not snapshots:
        console.print(f"No scans recorded on {target.isoformat()}.", style="dim")
        return
    table = Table(title=f"Scans on {target.isoformat()}", box=box.SIMPLE_HEAD)
    table.add_column("Timestamp", style="cyan")
    table.add_column("Found", justify="right")
    table.add_column("New", justify="right", style="green")
    table.add_column("Changed", justify="right", style="magenta")
    table.add_column("Updated", justify="right")
    table.add_column("Empty / failed sources", overflow="fold")
    for snapshot in snapshots:
        changes = snapshot.get("changes") or {}
        empty = ", ".join(snapshot.get("empty_sources") or []) or "-"
        failed = ", ".join(snapshot.get("failed_sources") or []) or "-"
        table.add_row(
            str(snapshot.get("timestamp", "-")),
            str(snapshot.get("items_found", 0)),
            str(len(changes.get("new", []))),
            str(len(changes.get("status_changed", []))),
            str(len(changes.get("updated", []))),
            f"{empty} / {failed}",
        )
    console.print(table)


@app.command("sources", help="List configured sources.")
def sources(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    configured = state.repository.list_sources()
    if not configured:
        console.print("No sources configured.", style="yellow")
        return
    console.print(_render_sources_table(configured))


@app.command("watch", help="Run scans on the configured schedule until interrupted.")
def watch(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    schedule = state.orchestrator.global_config.schedule
    scheduler = APSchedulerAdapter(blocking=True)
    scheduler.schedule_scan(schedule, state.orchestrator.run_scan)
    console.print(f"Watching with schedule {_format_schedule(schedule)}. Ctrl+C to stop.", style="cyan")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        scheduler.shutdown()
        console.print("Stopped.", style="dim")


@log_app.command("list", help="List per-source log files.")
def log_list() -> None:
    logs = list(available_source_logs())
    if not logs:
        console.print("No source logs yet.", style="dim")
        return
    table = Table(box=box.SIMPLE_HEAD)
    table.add_column("File", style="green")
    for path in logs:
        table.add_row(path.name)
    console.print(table)


@log_app.command("show", help="Show the last lines of a log file.")
def log_show(
    name: Optional[str] = typer.Option(None, "--source", help="Source name (global log when omitted)."),
    tail: int = typer.Option(100, "--tail", help="Number of trailing lines."),
) -> None:
    lines = tail_log(log_path(name), tail)
    if not lines:
        console.print("No log lines yet.", style="dim")
        return
    header = f"{'Source' if name else 'Global'} log · last {len(lines)} lines"
    console.print(header, style="cyan")
    console.print("".join(lines))


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
