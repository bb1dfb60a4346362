#!/usr/bin/env python3
"""Far Horizons - Main entry point.

Creates a galaxy from a setup file, finishes turns, writes status reports
and order templates, and inspects the galaxy for the game master.
"""

import argparse
import logging
import shutil
import sys
from pathlib import Path

from farhorizons.engine import finish_turn, generate_galaxy
from farhorizons.errors import FarHorizonsError
from farhorizons.interface.orders import render_orders
from farhorizons.interface.report import render_report
from farhorizons.interface.scan import list_galaxy, scan_galaxy_at
from farhorizons.models import Coords, Game
from farhorizons.schemas import load_players, load_setup_config
from farhorizons.utils import MAX_TURN, RNG_SEED_DEFAULT, GameRNG
from farhorizons.utils import serialization as store

logger = logging.getLogger(__name__)

SETUP_FILE = "setup.json"
PLAYERS_FILE = "players.json"


def create_galaxy(args) -> int:
    """Generate a new galaxy and write turn 0."""
    setup_file = Path(args.setup_file)
    config = load_setup_config(setup_file)
    players_file = Path(args.players_file) if args.players_file else setup_file.parent / PLAYERS_FILE
    players = load_players(players_file)

    result = generate_galaxy(config, players, GameRNG(args.seed))
    print(result.transcript, end="")

    game_dir = config.galaxy_path
    game_dir.mkdir(parents=True, exist_ok=True)
    if setup_file.resolve() != (game_dir / SETUP_FILE).resolve():
        shutil.copyfile(setup_file, game_dir / SETUP_FILE)
    if players_file.resolve() != (game_dir / PLAYERS_FILE).resolve():
        shutil.copyfile(players_file, game_dir / PLAYERS_FILE)

    game = Game()
    path = store.turn_path(game_dir, game.current_turn)
    store.save_galaxy(path, result.galaxy)
    for number, text in result.scan_logs.items():
        store.write_text(store.log_file(path, number), text)
    store.save_game(game_dir, game)
    print(f"Created galaxy {config.galaxy.name!r} in {game_dir}")
    return 0


def finish(args) -> int:
    """Finish the current turn."""
    result = finish_turn(Path(args.game_dir), GameRNG(args.seed))
    if result.missing_orders:
        numbers = ", ".join(f"SP{n:02d}" for n in result.missing_orders)
        print(f"No orders received from {numbers}")
    if args.test:
        for number in sorted(result.logs):
            print(f"===== SP{number:02d} =====")
            print(result.logs[number], end="")
    print(f"Finished turn {result.turn - 1}, now on turn {result.turn}")
    return 0


def _turn_number(value: str) -> int:
    try:
        turn = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid turn {value!r}") from None
    if not (1 <= turn <= MAX_TURN):
        raise argparse.ArgumentTypeError(f"turn must be 1-{MAX_TURN}")
    return turn


def report(args) -> int:
    """Write the status report and order template for every species.

    With --test the reports are printed without their order templates.
    """
    game_dir = Path(args.game_dir)
    game = store.load_game(game_dir)
    turn = args.turn if args.turn is not None else game.current_turn
    if turn > game.current_turn:
        raise FarHorizonsError(f"turn {turn} has not been played yet (current turn is {game.current_turn})")

    path = store.turn_path(game_dir, turn)
    galaxy = store.load_galaxy(path)
    for species in galaxy.species:
        log = store.log_file(path, species.number)
        log_text = log.read_text() if log.exists() else None
        text = render_report(galaxy, species, turn, log_text, test_mode=args.test)
        if args.test:
            print(text, end="")
        else:
            text += render_orders(galaxy, species)
            store.write_text(store.report_file(path, species.number), text)
            logger.info(f"Wrote report for SP {species.name}")
    return 0


def run_discard(args) -> int:
    """Roll the turn counter back by one."""
    game_dir = Path(args.game_dir)
    game = store.load_game(game_dir)
    before = game.current_turn
    game.discard()
    store.save_game(game_dir, game)
    print(f"Turn {before} discarded, now on turn {game.current_turn}")
    return 0


def list_command(args) -> int:
    """Print every system in the galaxy."""
    game_dir = Path(args.game_dir)
    game = store.load_game(game_dir)
    galaxy = store.load_galaxy(store.turn_path(game_dir, game.current_turn))
    print(list_galaxy(galaxy, planets=args.planets, wormholes=args.wormholes), end="")
    return 0


def scan(args) -> int:
    """Print a scan of the system at x y z."""
    game_dir = Path(args.game_dir)
    game = store.load_game(game_dir)
    galaxy = store.load_galaxy(store.turn_path(game_dir, game.current_turn))
    print(scan_galaxy_at(galaxy, Coords(args.x, args.y, args.z)), end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Far Horizons - play-by-turn 4X strategy engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s create galaxy --setup-file setup.json   # Generate turn 0
  %(prog)s finish                                   # Finish the current turn
  %(prog)s report --turn 3                          # Reports for turn 3
  %(prog)s run discard                              # Roll back one turn
  %(prog)s list galaxy --planets                    # List systems and planets
  %(prog)s scan 10 12 3                             # Scan one system
        """,
    )
    parser.add_argument("--game-dir", default=".", help="Game directory (default: current directory)")
    parser.add_argument(
        "--seed",
        type=int,
        default=RNG_SEED_DEFAULT,
        help=f"Random seed (default: {RNG_SEED_DEFAULT})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="Create game files")
    create_what = create.add_subparsers(dest="what", required=True)
    galaxy = create_what.add_parser("galaxy", help="Generate a new galaxy")
    galaxy.add_argument("--setup-file", required=True, help="Path to setup.json")
    galaxy.add_argument("--players-file", help="Path to players.json (default: beside the setup file)")
    galaxy.set_defaults(handler=create_galaxy)

    finish_cmd = commands.add_parser("finish", help="Finish the current turn")
    finish_cmd.add_argument("--test", action="store_true", help="Also print the event logs")
    finish_cmd.set_defaults(handler=finish)

    report_cmd = commands.add_parser("report", help="Write status reports and order templates")
    which = report_cmd.add_mutually_exclusive_group()
    which.add_argument("--current-turn", action="store_true", help="Report on the current turn (default)")
    which.add_argument("--turn", type=_turn_number, help=f"Report on turn N (1-{MAX_TURN})")
    report_cmd.add_argument("--test", action="store_true", help="Print reports instead of writing them")
    report_cmd.set_defaults(handler=report)

    run = commands.add_parser("run", help="Game file maintenance")
    run_what = run.add_subparsers(dest="what", required=True)
    discard = run_what.add_parser("discard", help="Discard the last finished turn")
    discard.set_defaults(handler=run_discard)

    list_cmd = commands.add_parser("list", help="List game data")
    list_what = list_cmd.add_subparsers(dest="what", required=True)
    listing = list_what.add_parser("galaxy", help="List every star system")
    detail = listing.add_mutually_exclusive_group()
    detail.add_argument("--planets", action="store_true", help="Also list planets")
    detail.add_argument("--wormholes", action="store_true", help="List only wormholes")
    listing.set_defaults(handler=list_command)

    scan_cmd = commands.add_parser("scan", help="Scan the star system at x y z")
    scan_cmd.add_argument("x", type=int)
    scan_cmd.add_argument("y", type=int)
    scan_cmd.add_argument("z", type=int)
    scan_cmd.set_defaults(handler=scan)

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        return args.handler(args)
    except FarHorizonsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
