"""CLI entry point: python -m handscribe <hand.yaml>"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from handscribe.config import RecorderConfig, load_config
from handscribe.engine.history import HandHistory
from handscribe.engine.variants import GAME_PRESETS
from handscribe.script import ScriptError, load_script, replay_script


def _summary_table(history: HandHistory) -> Table:
    """Round-by-round pot and betting summary."""
    table = Table(title=f"{history.game.name} ({history.table_size} players)")
    table.add_column("Round")
    table.add_column("Entries", justify="right")
    table.add_column("Bets/raises", justify="right")
    table.add_column("To call", justify="right")
    table.add_column("Pot", justify="right")
    for rnd in history.rounds:
        illegal = sum(1 for a in rnd.actions if not a.is_legal)
        entries = str(len(rnd.actions))
        if illegal:
            entries += f" [red]({illegal} illegal)[/red]"
        table.add_row(rnd.name, entries, str(rnd.bet_count), str(rnd.current_bet), str(rnd.pot))
    return table


def _list_games(console: Console) -> None:
    table = Table(title="Games")
    table.add_column("Name")
    table.add_column("Family")
    table.add_column("Cards", justify="right")
    table.add_column("Structure")
    table.add_column("Rounds")
    for game in GAME_PRESETS.values():
        table.add_row(
            game.name,
            game.kind.value,
            str(game.hand_size),
            "fixed limit" if game.fixed_limit else "no limit",
            ", ".join(game.round_names),
        )
    console.print(table)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="handscribe",
        description="Replay a hand script and print its canonical hand history",
    )
    parser.add_argument(
        "script",
        type=Path,
        nargs="?",
        help="Path to a hand script YAML file",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Recorder config YAML (defaults, ante policy, per-game overrides)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the hand history to this file instead of stdout",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        default=False,
        help="Also print a round/pot summary table",
    )
    parser.add_argument(
        "--list-games",
        action="store_true",
        default=False,
        help="List the supported games and exit",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    console = Console()

    if args.list_games:
        _list_games(console)
        return

    if args.script is None:
        parser.error("a hand script is required unless --list-games is given")

    if not args.script.exists():
        print(f"Error: script not found: {args.script}", file=sys.stderr)
        sys.exit(1)

    config = RecorderConfig()
    if args.config:
        if not args.config.exists():
            print(f"Error: config file not found: {args.config}", file=sys.stderr)
            sys.exit(1)
        config = load_config(args.config)

    try:
        recorder = replay_script(load_script(args.script), config)
    except (ScriptError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    text = recorder.text()
    if args.output:
        args.output.write_text(text)
        print(f"Hand history: {args.output}")
    else:
        sys.stdout.write(text)

    if args.summary:
        console.print(_summary_table(recorder.history))


if __name__ == "__main__":
    main()
