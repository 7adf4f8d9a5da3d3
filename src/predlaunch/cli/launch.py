"""Launch subcommand: create, vote, start-predict, bet, settle, claim, show, list, bets."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer

from predlaunch.aggregation.consensus import balance_settlement, median_mcap
from predlaunch.engine.ports import FanoutEventSink, FixedClock, LogEventSink, SystemClock
from predlaunch.engine.service import LaunchService
from predlaunch.errors import LaunchError
from predlaunch.kernel.arithmetic import participant_pool
from predlaunch.models.launch import Launch
from predlaunch.storage.custody import CustodyLedger, MintLedger
from predlaunch.storage.db import get_connection, init_schema
from predlaunch.storage.event_log import EventLogSink
from predlaunch.storage.store import DuckDBLaunchStore

app = typer.Typer(help="Token launch lifecycle")

_AS_HELP = "Caller identity (default: launch.default_identity from config)"


@contextmanager
def _service(ctx: typer.Context) -> Iterator[LaunchService]:
    """Service bound to the configured DuckDB file. LaunchError -> exit code 1."""
    settings = ctx.obj["settings"]
    conn = get_connection(ctx.obj["db_path"])
    init_schema(conn)
    clock = FixedClock(ctx.obj["now"]) if ctx.obj.get("now") is not None else SystemClock()
    store = DuckDBLaunchStore(conn)
    try:
        yield LaunchService(
            store,
            payment_rail=CustodyLedger(conn),
            minter=MintLedger(conn),
            clock=clock,
            events=FanoutEventSink(EventLogSink(conn, lock=store.lock), LogEventSink()),
            base_units_per_unit=settings.base_units_per_unit,
            normalized_claims=settings.normalized_claims,
        )
    except LaunchError as e:
        typer.echo(f"Error [{e.code}]: {e.detail}", err=True)
        raise typer.Exit(1)
    finally:
        conn.close()


def _identity(ctx: typer.Context, identity: str | None) -> str:
    return identity or ctx.obj["settings"].default_identity


def _echo_launch(launch: Launch) -> None:
    typer.echo(f"Launch: {launch.launch_id}  ({launch.symbol})  authority={launch.authority}")
    typer.echo(f"Phase: {launch.phase.value}")
    typer.echo(f"Discovery ends: {launch.discovery_end}  Predict ends: {launch.predict_end}")
    typer.echo(f"Total supply: {launch.total_supply}  Participant pool: {participant_pool(launch.total_supply)}")
    typer.echo(f"Votes: {launch.total_votes}  Locked: {launch.total_locked}")
    if launch.median_mcap is not None:
        typer.echo(f"Median mcap: {launch.median_mcap}")
    if launch.settlement_value is not None:
        typer.echo(f"Settlement: {launch.settlement_value}  Distributed: {launch.total_distributed}")


@app.command("create")
def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Launch name (unique, max 32 bytes)"),
    symbol: str = typer.Option(..., "--symbol", "-s", help="Ticker (max 10 bytes)"),
    supply: int = typer.Option(..., "--supply", help="Total token supply"),
    discovery: int = typer.Option(3600, "--discovery", help="Discovery window in seconds (max 3600)"),
    predict: int = typer.Option(86400, "--predict", help="Predict window in seconds (max 86400)"),
    identity: str | None = typer.Option(None, "--as", help=_AS_HELP),
) -> None:
    """Create a launch in the discovery phase."""
    with _service(ctx) as service:
        launch = service.create_launch(_identity(ctx, identity), name, symbol, supply, discovery, predict)
        _echo_launch(launch)


@app.command("show")
def show(ctx: typer.Context, name: str = typer.Argument(...)) -> None:
    """Show a launch."""
    with _service(ctx) as service:
        _echo_launch(service.get_launch(name))


@app.command("list")
def list_launches(ctx: typer.Context) -> None:
    """List launches, newest first."""
    with _service(ctx) as service:
        launches = service.store.list_launches()
        for launch in launches:
            typer.echo(f"  {launch.launch_id[:32]:32}  {launch.symbol:10}  {launch.phase.value:9}  locked={launch.total_locked}")
        typer.echo(f"Total: {len(launches)} launches")


@app.command("vote")
def vote(
    ctx: typer.Context,
    name: str = typer.Argument(...),
    mcap: int = typer.Option(..., "--mcap", help="Expected market cap"),
    identity: str | None = typer.Option(None, "--as", help=_AS_HELP),
) -> None:
    """Submit a valuation vote during discovery."""
    with _service(ctx) as service:
        v = service.submit_vote(name, _identity(ctx, identity), mcap)
        typer.echo(f"Vote recorded: {v.voter} -> {v.mcap_vote}")


@app.command("start-predict")
def start_predict(
    ctx: typer.Context,
    name: str = typer.Argument(...),
    median: int | None = typer.Option(None, "--median", help="Median mcap (default: computed from votes)"),
    identity: str | None = typer.Option(None, "--as", help=_AS_HELP),
) -> None:
    """Close discovery and open the predict phase."""
    with _service(ctx) as service:
        if median is None:
            median = median_mcap(service.list_votes(name))
        launch = service.advance_to_predict(name, _identity(ctx, identity), median)
        typer.echo(f"Predict phase started with median mcap {launch.median_mcap}")


@app.command("bet")
def bet(
    ctx: typer.Context,
    name: str = typer.Argument(...),
    breakpoint: int = typer.Option(..., "--breakpoint", "-b"),
    is_yes: bool = typer.Option(True, "--yes/--no", help="Settlement at or above breakpoint (yes) or below (no)"),
    amount: int = typer.Option(..., "--amount", "-a", help="Stake in smallest currency units"),
    identity: str | None = typer.Option(None, "--as", help=_AS_HELP),
) -> None:
    """Stake on a breakpoint during the predict phase."""
    with _service(ctx) as service:
        b = service.place_bet(name, _identity(ctx, identity), breakpoint, is_yes, amount)
        typer.echo(f"Bet id: {b.bet_id}")
        typer.echo(f"Multiplier: {b.multiplier} bp")


@app.command("settle")
def settle(
    ctx: typer.Context,
    name: str = typer.Argument(...),
    value: int | None = typer.Option(None, "--value", help="Settlement value (default: stake-balanced breakpoint)"),
    identity: str | None = typer.Option(None, "--as", help=_AS_HELP),
) -> None:
    """Close the predict phase and fix the settlement value."""
    with _service(ctx) as service:
        if value is None:
            value = balance_settlement(service.list_bets(name))
        launch = service.settle(name, _identity(ctx, identity), value)
        typer.echo(f"Settled at {launch.settlement_value} (locked {launch.total_locked})")


@app.command("claim")
def claim(
    ctx: typer.Context,
    name: str = typer.Argument(...),
    bet_id: str = typer.Argument(...),
    identity: str | None = typer.Option(None, "--as", help=_AS_HELP),
) -> None:
    """Claim tokens for a settled bet."""
    with _service(ctx) as service:
        result = service.claim(name, bet_id, _identity(ctx, identity))
        typer.echo(f"Tokens: {result.tokens}  Accuracy: {result.accuracy} bp  Weight: {result.weight}")


@app.command("bets")
def bets(
    ctx: typer.Context,
    name: str = typer.Argument(...),
    bettor: str | None = typer.Option(None, "--bettor"),
) -> None:
    """List bets of a launch."""
    with _service(ctx) as service:
        rows = service.list_bets(name, bettor=bettor)
        for b in rows:
            side = "yes" if b.is_yes else "no"
            status = "claimed" if b.claimed else "open"
            typer.echo(f"  {b.bet_id}  {b.bettor}  {side:3} @ {b.breakpoint}  amount={b.amount}  x{b.multiplier}bp  {status}")
        typer.echo(f"Total: {len(rows)} bets")
