"""Log subcommand: stats, tail, export."""

from __future__ import annotations

import typer

from predlaunch.storage.db import get_connection, init_schema
from predlaunch.storage.event_log import list_events, log_stats
from predlaunch.storage.export import export_events_to_parquet

app = typer.Typer(help="Notification log statistics and export")


@app.command("stats")
def stats(ctx: typer.Context) -> None:
    """Show notification log statistics (counts, time range, by type)."""
    conn = get_connection(ctx.obj["db_path"])
    init_schema(conn)
    try:
        s = log_stats(conn)
        typer.echo(f"Total events: {s['total_events']}")
        typer.echo(f"Min ts: {s.get('min_ts')}")
        typer.echo(f"Max ts: {s.get('max_ts')}")
        if s.get("by_type"):
            typer.echo("By type:")
            for row in s["by_type"]:
                typer.echo(f"  {row['event_type']}  {row['count']}")
    finally:
        conn.close()


@app.command("tail")
def tail(
    ctx: typer.Context,
    launch: str | None = typer.Option(None, "--launch", "-l", help="Filter by launch"),
    limit: int = typer.Option(20, "--limit", "-n"),
) -> None:
    """Print the most recent notifications."""
    conn = get_connection(ctx.obj["db_path"])
    init_schema(conn)
    try:
        for row in reversed(list_events(conn, launch_id=launch, limit=limit)):
            typer.echo(f"  {row['ts']}  {row['launch_id']}  {row['event_type']}  {row['payload']}")
    finally:
        conn.close()


@app.command("export")
def export(
    ctx: typer.Context,
    launch: str | None = typer.Option(None, "--launch", "-l", help="Filter by launch"),
    event_type: str | None = typer.Option(None, "--type", "-t", help="Filter by event type"),
    output: str = typer.Option("events.parquet", "--output", "-o", help="Output path"),
) -> None:
    """Export notifications to Parquet."""
    conn = get_connection(ctx.obj["db_path"])
    init_schema(conn)
    try:
        count = export_events_to_parquet(conn, output, launch_id=launch, event_type=event_type)
        typer.echo(f"Exported {count} events to {output}")
    finally:
        conn.close()
