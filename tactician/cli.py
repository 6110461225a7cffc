"""
Tactician CLI - Command-line interface for the engine.

Usage:
    tactician strategy [--map FILE] [--team0 TYPE] [--team1 TYPE]   Play the tactics game
    tactician tictactoe [--x TYPE] [--o TYPE]                        Play tic-tac-toe
    tactician map validate <map_file>                                Check a map file
    tactician map default [--width W] [--height H]                   Print the default map
    tactician serve [--host HOST] [--port PORT]                      Run the API server

Seats default to human players, who type their actions at the prompt.
"""

import argparse
import logging
import sys

from .controllers import ControllerType, available_types
from .games import GameKind
from .log import configure_logging

logger = logging.getLogger(__name__)

STRATEGY_HELP = """\
Actions: end | cancel | select X Y | move X Y | attack X Y | quit"""

STRATEGY_COMMANDS = {
    "end": "end_turn",
    "cancel": "cancel_selection",
    "select": "select_unit",
    "move": "move_unit",
    "attack": "attack",
}


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tactician - Search-driven opponents for turn-based games",
        prog="tactician",
    )
    parser.add_argument(
        "--log-level",
        help="DEBUG, INFO, WARNING or ERROR (default: $TACTICIAN_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    strategy_types = [t.value for t in available_types(GameKind.STRATEGY)]
    tictactoe_types = [t.value for t in available_types(GameKind.TICTACTOE)]

    # Strategy command
    strategy_parser = subparsers.add_parser("strategy", help="Play the tactics game")
    strategy_parser.add_argument("--map", help="Path to a map file (default map if omitted)")
    strategy_parser.add_argument("--width", type=int, default=5, help="Default map width")
    strategy_parser.add_argument("--height", type=int, default=5, help="Default map height")
    strategy_parser.add_argument("--team0", choices=strategy_types, default="human")
    strategy_parser.add_argument("--team1", choices=strategy_types, default="astar_one")
    strategy_parser.add_argument("--personality", default="balanced", help="Personality for astar_one/astar_two")
    strategy_parser.add_argument("--turns", type=int, help="Stop after this many AI decisions")
    strategy_parser.add_argument("--seed", type=int, help="Seed for random controllers")

    # Tic-tac-toe command
    ttt_parser = subparsers.add_parser("tictactoe", help="Play tic-tac-toe")
    ttt_parser.add_argument("--x", dest="x_type", choices=tictactoe_types, default="human")
    ttt_parser.add_argument("--o", dest="o_type", choices=tictactoe_types, default="tictactoe")
    ttt_parser.add_argument("--seed", type=int, help="Seed for random controllers")

    # Map commands
    map_parser = subparsers.add_parser("map", help="Map file tools")
    map_subparsers = map_parser.add_subparsers(dest="map_command", help="Map commands")
    validate_parser = map_subparsers.add_parser("validate", help="Validate a map file")
    validate_parser.add_argument("map_file", help="Path to map file")
    default_parser = map_subparsers.add_parser("default", help="Print the default map")
    default_parser.add_argument("--width", type=int, default=5)
    default_parser.add_argument("--height", type=int, default=5)
    default_parser.add_argument("--output", "-o", help="Write to a file instead of stdout")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    if args.command == "strategy":
        return cmd_strategy(args)
    elif args.command == "tictactoe":
        return cmd_tictactoe(args)
    elif args.command == "map" and args.map_command == "validate":
        return cmd_map_validate(args)
    elif args.command == "map" and args.map_command == "default":
        return cmd_map_default(args)
    elif args.command == "serve":
        return cmd_serve(args)

    parser.print_help()
    return 1


# =============================================================================
# Games
# =============================================================================

def cmd_strategy(args):
    """Play the tactics game."""
    map_text = None
    if args.map:
        try:
            with open(args.map, "r", encoding="utf-8") as f:
                map_text = f.read()
        except FileNotFoundError:
            print(f"Error: File not found: {args.map}", file=sys.stderr)
            return 1

    seat_types = {"0": args.team0, "1": args.team1}
    config = {
        seat: {"seed": args.seed, "personality": args.personality}
        for seat in seat_types
    }
    return _play(
        GameKind.STRATEGY,
        seat_types,
        config,
        map_text=map_text,
        width=args.width,
        height=args.height,
        max_decisions=args.turns,
    )


def cmd_tictactoe(args):
    """Play tic-tac-toe."""
    seat_types = {"X": args.x_type, "O": args.o_type}
    config = {seat: {"seed": args.seed} for seat in seat_types}
    return _play(GameKind.TICTACTOE, seat_types, config)


def _play(game, seat_types, config, map_text=None, width=5, height=5, max_decisions=None):
    from .games.strategy import MapFormatError
    from .session import GameLoop, LoopState, SessionManager

    controllers = {
        seat: seat_type for seat, seat_type in seat_types.items()
        if seat_type != ControllerType.HUMAN.value
    }
    manager = SessionManager()
    try:
        session = manager.create_session(
            game,
            controllers=controllers,
            map_text=map_text,
            width=width,
            height=height,
            controller_config=config,
        )
    except MapFormatError as e:
        print(f"Error: invalid map: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    loop = GameLoop(session)
    decisions = 0
    try:
        while True:
            remaining = None if max_decisions is None else max_decisions - decisions
            result = loop.run_until_human(max_decisions=remaining)
            decisions += result.decisions
            for line in result.actions:
                print(line)
            for warning in result.warnings:
                print(f"Warning: {warning}")

            if result.loop_state is LoopState.GAME_OVER:
                _show(session)
                winner = session.winner()
                print("Tie game" if winner is None else f"Seat {winner} wins")
                return 0
            if not result.success:
                for error in result.errors:
                    print(f"Error: {error}", file=sys.stderr)
                return 1
            if result.loop_state is not LoopState.WAITING_HUMAN_ACTION:
                _show(session)
                return 0

            if not _human_turn(session):
                return 0
    finally:
        loop.shutdown()


def _show(session):
    state = session.game_state
    if session.game is GameKind.STRATEGY:
        print(state.map.render())
        print(
            f"Turn {state.turn_number}, team {state.current_team}: "
            f"{state.remaining_mp} MP, {state.remaining_ap} AP, "
            f"selected {state.selection}"
        )
    else:
        print(state.render())


def _human_turn(session):
    """Prompt until one legal action is played. False if the player quits."""
    _show(session)
    seat = session.current_seat
    if session.game is GameKind.STRATEGY:
        print(STRATEGY_HELP)

    while True:
        try:
            line = input(f"{seat}> ").strip()
        except EOFError:
            return False
        if line in ("quit", "q"):
            return False

        try:
            action = session.adapter.parse_action(_parse_command(session.game, line))
        except ValueError as e:
            print(f"Error: {e}")
            continue

        if session.apply_human_action(action):
            print(session.action_log[-1])
            return True
        print(f"Illegal action: {session.adapter.describe(action)}")


def _parse_command(game, line):
    """Turn a typed command into an action dictionary."""
    words = line.split()
    if not words:
        raise ValueError("Type an action")

    if game is GameKind.STRATEGY:
        tag = STRATEGY_COMMANDS.get(words[0])
        if tag is None:
            raise ValueError(f"Unknown command {words[0]!r}")
        words = words[1:]
        data = {"tag": tag}
    else:
        data = {}

    if words:
        if len(words) != 2:
            raise ValueError("A location is two numbers: X Y")
        data["location"] = [int(words[0]), int(words[1])]
    return data


# =============================================================================
# Maps
# =============================================================================

def cmd_map_validate(args):
    """Validate a map file."""
    from .games.strategy import GameState, MapFormatError, loads

    try:
        with open(args.map_file, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {args.map_file}", file=sys.stderr)
        return 1

    try:
        m = loads(text)
    except MapFormatError as e:
        print(f"Invalid: {e}", file=sys.stderr)
        return 1

    state = GameState.new(m)
    print(f"Valid: {m.width}x{m.height}, {m.starting_mp} MP, {m.starting_ap} AP")
    print(f"Objects: {len(m.field)}")
    for team, count in state.teams:
        print(f"  Team {team}: {count} unit(s)")
    if len(state.teams) < 2:
        print("Warning: fewer than two teams, the game is over before it starts")
    return 0


def cmd_map_default(args):
    """Print the default map."""
    from .games.strategy import Map, dumps

    try:
        text = dumps(Map.default(args.width, args.height))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
    else:
        print(text, end="")
    return 0


# =============================================================================
# Server
# =============================================================================

def cmd_serve(args):
    """Run the API server."""
    import uvicorn

    logger.info("Serving on %s:%d", args.host, args.port)
    uvicorn.run("tactician.api.app:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
