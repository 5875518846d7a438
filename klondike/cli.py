"""
Klondike CLI - Command-line interface for the engine.

Usage:
    klondike deal [--seed N]             Print a freshly dealt board
    klondike play [--seed N]             Play a game in the terminal
    klondike serve [--host H --port P]   Run the REST API
"""

from __future__ import annotations
import argparse
import logging
import os
import sys

from .engine_core.action import Action, ActionResult
from .engine_core.state import Card, GameState, Suit


PLAY_HELP = """Commands:
  d            draw (or turn the waste over)
  wf           waste -> foundation
  wt C         waste -> column C
  tf C         column C -> foundation
  tt F T I     column F, from card I, -> column T
  u            undo
  r            new game
  h            hint
  s            toggle sound
  ?            this help
  q            quit
Columns and card positions are 1-based."""


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Klondike - Single-deck Klondike Solitaire",
        prog="klondike",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("KLONDIKE_LOG_LEVEL", "WARNING"),
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    deal_parser = subparsers.add_parser("deal", help="Print a freshly dealt board")
    deal_parser.add_argument("--seed", type=int, help="Seed for a reproducible deal")

    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument("--seed", type=int, help="Seed for a reproducible deal")
    play_parser.add_argument("--no-sound", action="store_true", help="Start with sound off")

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    if args.command == "deal":
        cmd_deal(args)
    elif args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_deal(args):
    """Print a freshly dealt board."""
    import random
    from .engine_core.deal import deal_new_game

    rng = random.Random(args.seed) if args.seed is not None else None
    print(render_board(deal_new_game(rng=rng)))


def cmd_play(args, input_fn=input, output=print):
    """Interactive terminal game."""
    from .session import SessionManager
    from .hints import HintAdvisor

    manager = SessionManager()
    session = manager.create_session(seed=args.seed)
    session.set_sound(not getattr(args, "no_sound", False))
    advisor = HintAdvisor()

    output(render_board(session.game_state))
    output("Type ? for help.")

    try:
        while True:
            try:
                line = input_fn("> ").strip()
            except EOFError:
                break
            if not line:
                continue
            if line in ("q", "quit", "exit"):
                break
            if line == "?":
                output(PLAY_HELP)
                continue
            if line == "h":
                output(advisor.advise(session.game_state).text)
                continue
            if line == "s":
                session.set_sound(not session.sound_enabled)
                output(f"Sound {'on' if session.sound_enabled else 'off'}")
                continue

            try:
                action = parse_command(line)
            except ValueError as e:
                output(f"Error: {e}")
                continue

            result = session.dispatch(action)
            output(render_result(result, session.sound_enabled))
            output(render_board(session.game_state))
            if session.game_state.is_won and result.success:
                output("You Won! Type r to play again.")
    finally:
        manager.end_session(session.session_id, reason="user_quit")


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "klondike.api.app:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


def parse_command(line: str) -> Action:
    """
    Parse a play command into an Action.

    Columns and card positions are 1-based on the command line.
    Raises ValueError for unknown commands or bad arguments.
    """
    parts = line.split()
    command, params = parts[0].lower(), parts[1:]

    expected = {"d": 0, "wf": 0, "wt": 1, "tf": 1, "tt": 3, "u": 0, "r": 0}
    if command not in expected:
        raise ValueError(f"Unknown command: {command}")
    if len(params) != expected[command]:
        raise ValueError(f"'{command}' takes {expected[command]} argument(s)")

    try:
        numbers = [int(p) - 1 for p in params]
    except ValueError:
        raise ValueError("Arguments must be numbers")

    if command == "d":
        return Action.draw()
    if command == "wf":
        return Action.waste_to_foundation()
    if command == "wt":
        return Action.waste_to_tableau(numbers[0])
    if command == "tf":
        return Action.tableau_to_foundation(numbers[0])
    if command == "tt":
        return Action.tableau_to_tableau(numbers[0], numbers[1], numbers[2])
    if command == "u":
        return Action.undo()
    return Action.reset()


def render_card(card: Card | None) -> str:
    if card is None:
        return "--"
    if not card.face_up:
        return "##"
    return card.short_name()


def render_foundation(state: GameState, suit: Suit) -> str:
    pile = state.foundation_for(suit)
    if pile.is_empty:
        return f"[{suit.symbol}]"
    return render_card(pile.top_card)


def render_board(state: GameState) -> str:
    """Plain-text board: stock/waste, foundations, then the columns top-down."""
    lines = []
    foundations = " ".join(render_foundation(state, suit) for suit in Suit)
    lines.append(
        f"Stock: {state.stock.count:>2}  Waste: {render_card(state.waste.top_card):<4}"
        f"  Foundations: {foundations}"
    )
    lines.append(f"Moves: {state.move_count}  Time: {format_time(state.elapsed_seconds)}")
    lines.append("")
    lines.append("  ".join(f"{i + 1:<4}" for i in range(len(state.tableau))).rstrip())

    depth = max((column.count for column in state.tableau), default=0)
    for row in range(depth):
        cells = []
        for column in state.tableau:
            cells.append(f"{render_card(column[row]) if row < column.count else '':<4}")
        lines.append("  ".join(cells).rstrip())
    return "\n".join(lines)


def render_result(result: ActionResult, sound_enabled: bool = True) -> str:
    if not result.success:
        return f"Not allowed: {result.reason}"
    text = "; ".join(result.state_changes)
    if sound_enabled and result.events:
        text += "  (" + ", ".join(event.value for event in result.events) + ")"
    return text


def format_time(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"


if __name__ == "__main__":
    main()
