"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from predlaunch.config import get_settings
from predlaunch.config.settings import configure_logging

app = typer.Typer(
    name="predlaunch",
    help="PredLaunch - phased token launches: discovery votes, breakpoint bets, settlement and claims.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
    db: str | None = typer.Option(None, "--db", help="DuckDB path (overrides storage.db_path)"),
    now: int | None = typer.Option(
        None, "--now", help="Pin the clock to this unix timestamp (dry runs, replays)"
    ),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    ctx.obj = {
        "settings": settings,
        "config_dir": config_dir,
        "profile": profile,
        "db_path": db or settings.db_path,
        "now": now,
    }


# Subcommands registered from other modules
from predlaunch.cli import kernel, launch, log  # noqa: E402

app.add_typer(launch.app, name="launch")
app.add_typer(kernel.app, name="kernel")
app.add_typer(log.app, name="log")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
