"""Command line helpers for Neon Royal."""

from __future__ import annotations

import argparse
import sys
from random import Random

from rich.console import Console
from rich.table import Table

from .app import CasinoApp
from .config import NeonRoyalConfig
from .diagnostics.simulator import CasinoSimulator, plain_context
from .domain.clock import Weekday
from .domain.ledger import GameType
from .validators import validate_app


def run_simulator(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Neon Royal return-to-player simulator")
    parser.add_argument(
        "game",
        choices=[game.value.lower() for game in GameType] + ["all"],
        help="Game to simulate",
    )
    parser.add_argument("--rounds", type=int, default=10000, help="Number of rounds to play")
    parser.add_argument("--wager", type=int, default=10, help="Stake per round")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for reproducible runs")
    parser.add_argument("--weekday", default="monday", help="Weekday whose payout table applies")
    args = parser.parse_args(argv)

    console = Console()
    try:
        context = plain_context(Weekday.parse(args.weekday))
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        sys.exit(2)

    simulator = CasinoSimulator(rng=Random(args.seed), context=context)
    games = list(GameType) if args.game == "all" else [GameType(args.game.upper())]

    table = Table(title=f"Return to player ({context.weekday.label})")
    table.add_column("Game")
    table.add_column("Rounds", justify="right")
    table.add_column("Wagered", justify="right")
    table.add_column("Paid", justify="right")
    table.add_column("RTP", justify="right")
    for game in games:
        result = simulator.simulate(game, rounds=args.rounds, wager=args.wager)
        table.add_row(
            game.display_name,
            str(result.rounds),
            str(result.wagered),
            str(result.paid),
            f"{result.rtp:.2%}",
        )
    console.print(table)


def run_validate(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Neon Royal configuration validator")
    parser.parse_args(argv)

    console = Console()
    try:
        config = NeonRoyalConfig.from_env()
    except ValueError as exc:
        console.print(f"[red]Invalid environment:[/red] {exc}")
        sys.exit(1)

    app = CasinoApp(config)
    issues = validate_app(app)
    if issues:
        console.print("[red]Configuration errors found:[/red]")
        for issue in issues:
            console.print(f"- {issue}")
        sys.exit(1)
    console.print("Configuration is valid ✅")
