"""Kernel subcommand: evaluate the reward arithmetic without touching storage."""

from __future__ import annotations

import typer

from predlaunch.errors import LaunchError
from predlaunch.kernel.arithmetic import accuracy_score, reward_weight, stake_multiplier

app = typer.Typer(help="Multiplier, accuracy and reward-weight calculator")


def _fail(e: LaunchError) -> None:
    typer.echo(f"Error [{e.code}]: {e.detail}", err=True)
    raise typer.Exit(1)


@app.command("multiplier")
def multiplier(units: int = typer.Argument(..., help="Whole currency units already locked")) -> None:
    """Multiplier (bp) a new stake would receive."""
    try:
        typer.echo(stake_multiplier(units))
    except LaunchError as e:
        _fail(e)


@app.command("accuracy")
def accuracy(
    breakpoint: int = typer.Option(..., "--breakpoint", "-b"),
    settlement: int = typer.Option(..., "--settlement", "-s"),
    is_yes: bool = typer.Option(True, "--yes/--no", help="Bet direction"),
) -> None:
    """Accuracy score (bp) of a bet against a settlement value."""
    try:
        typer.echo(accuracy_score(breakpoint, settlement, is_yes))
    except LaunchError as e:
        _fail(e)


@app.command("weight")
def weight(
    amount: int = typer.Option(..., "--amount", "-a"),
    accuracy_bp: int = typer.Option(..., "--accuracy"),
    multiplier_bp: int = typer.Option(..., "--multiplier", "-m"),
) -> None:
    """Reward weight for a stake."""
    try:
        typer.echo(reward_weight(amount, accuracy_bp, multiplier_bp))
    except LaunchError as e:
        _fail(e)
