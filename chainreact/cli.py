"""
Chain Reaction CLI - Command-line interface for the engine.

Usage:
    chainreact play [--width W] [--height H] [--difficulty N]   Play against the AI
    chainreact simulate [--difficulty N] [--seed S]             Watch an AI vs AI match
    chainreact puzzles [--category C]                           List the puzzle library
    chainreact puzzles --generate TIER [--count N] [--seed S]   Generate random puzzles
    chainreact serve [--host H] [--port P]                      Run the HTTP API
"""

import argparse
import logging
import sys

from . import config

OWNER_MARKS = "ABCDEFGH"


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Chain Reaction - orb placement and cascade engine",
        prog="chainreact",
    )
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game against the AI")
    play_parser.add_argument("--width", type=int, default=6, help="Board columns")
    play_parser.add_argument("--height", type=int, default=9, help="Board rows")
    play_parser.add_argument("--difficulty", type=int, default=config.DEFAULT_DIFFICULTY, help="AI level 1-5")
    play_parser.add_argument("--seed", type=int, default=None, help="Seed for the AI")

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Run an AI vs AI match")
    sim_parser.add_argument("--width", type=int, default=6, help="Board columns")
    sim_parser.add_argument("--height", type=int, default=9, help="Board rows")
    sim_parser.add_argument("--difficulty", type=int, default=config.DEFAULT_DIFFICULTY, help="AI level 1-5")
    sim_parser.add_argument("--seed", type=int, default=None, help="Seed for the AIs")
    sim_parser.add_argument("--max-moves", type=int, default=500, help="Stop after this many moves")

    # Puzzles command
    puzzles_parser = subparsers.add_parser("puzzles", help="List puzzles")
    puzzles_parser.add_argument("--category", default=None, help="Only this category")
    puzzles_parser.add_argument("--generate", default=None, metavar="TIER", help="Generate puzzles for a tier instead")
    puzzles_parser.add_argument("--count", type=int, default=5, help="Puzzles to generate")
    puzzles_parser.add_argument("--seed", type=int, default=None, help="Seed for the generator")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "puzzles":
        cmd_puzzles(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def render_board(board) -> str:
    """Text rendering: '.' for empty cells, orb count plus owner letter otherwise."""
    lines = ["    " + " ".join(f"{x:>2}" for x in range(board.width))]
    for y, row in enumerate(board.rows()):
        cells = []
        for cell in row:
            if cell.is_empty:
                cells.append(" .")
            else:
                cells.append(f"{cell.orb_count}{OWNER_MARKS[cell.owner % len(OWNER_MARKS)]}")
        lines.append(f"{y:>2}  " + " ".join(cells))
    return "\n".join(lines)


def cmd_play(args):
    """Interactive game: one human seat against the AI."""
    from .session import GameLoop, InMemoryResultSink, SessionManager

    sink = InMemoryResultSink()
    manager = SessionManager(sink=sink)
    try:
        session = manager.create_session(
            args.width, args.height, ai_difficulty=args.difficulty, seed=args.seed
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    loop = GameLoop(session, sink=sink)

    print("You are A. Enter moves as 'x y', 'u' to undo, 'q' to quit.")
    while not session.run.is_over:
        print(render_board(session.run.board))
        try:
            line = input("> ").strip().lower()
        except EOFError:
            break
        if line == "q":
            break
        if line == "u":
            if not session.undo():
                print("Nothing to undo")
            continue
        try:
            x, y = (int(part) for part in line.split())
        except ValueError:
            print("Enter two numbers: x y")
            continue

        result = loop.play_human_move(x, y)
        if not result.success:
            print(f"Rejected: {result.error}")
            continue
        for change in result.changes:
            print(f"  {change}")

    print(render_board(session.run.board))
    if session.run.is_over:
        winner = session.run.get_player(session.run.winner)
        print(f"Winner: {winner.name if winner else 'none'}")
        print(f"Points: {sink.total_points()}  Achievements: {', '.join(sink.achievements()) or '-'}")
    manager.end_session(session.session_id, reason="cli_exit")


def cmd_simulate(args):
    """AI vs AI match on one board."""
    from .session import GameLoop, SessionManager

    manager = SessionManager()
    try:
        session = manager.create_session(
            args.width,
            args.height,
            player_names=("Red", "Blue"),
            ai_seats=(0, 1),
            ai_difficulty=args.difficulty,
            seed=args.seed,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    result = GameLoop(session).run_ai_turns(max_moves=args.max_moves)
    print(render_board(session.run.board))
    print(f"Moves played: {len(result.moves)}  Explosions: {result.explosions}")
    if session.run.is_over:
        print(f"Winner: {session.run.get_player(session.run.winner).name}")
    else:
        print("No winner within the move limit")
    manager.end_session(session.session_id, reason="simulation_done")


def cmd_puzzles(args):
    """List the puzzle library (or freshly generated puzzles) with difficulty tiers."""
    import random

    from .puzzles.generator import PuzzleGenerator
    from .puzzles.library import ALL_PUZZLES, puzzles_by_category

    if args.generate:
        try:
            puzzles = PuzzleGenerator(rng=random.Random(args.seed)).generate_puzzle_set(args.count, args.generate)
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        puzzles = puzzles_by_category(args.category) if args.category else ALL_PUZZLES
    if not puzzles:
        print(f"No puzzles in category {args.category}")
        return
    for puzzle in puzzles:
        print(
            f"{puzzle.puzzle_id:<16} {puzzle.title:<28} "
            f"{puzzle.category:<10} {puzzle.difficulty_tier():<8} "
            f"{puzzle.max_moves} moves"
        )


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
