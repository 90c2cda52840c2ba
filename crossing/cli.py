"""
Crossing CLI - Command-line interface for the puzzle.

Usage:
    crossing play [--user NAME] [--log-dir DIR]    Play in the terminal
    crossing export --user NAME [--session N]     Print a logged session as CSV
    crossing serve [--host H] [--port P]          Run the REST API
"""

import argparse
import logging
import os
import sys

PLAY_HELP = """Commands:
  cat | rabbit | vegetable   load the item onto the boat, or unload it
  cross                      row to the other shore
  reset                      start over
  log                        show this attempt's move log as CSV
  help                       show this help
  quit                       leave the game"""


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Crossing - River Crossing Puzzle",
        prog="crossing",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("CROSSING_LOG_LEVEL", "WARNING"),
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--user", default=os.getenv("USER", "player"), help="Player ID")
    play_parser.add_argument(
        "--log-dir",
        default=os.getenv("CROSSING_LOG_DIR"),
        help="Directory for move logs (kept in memory if omitted)",
    )

    # Export command
    export_parser = subparsers.add_parser("export", help="Print a logged session as CSV")
    export_parser.add_argument("--user", required=True, help="Player ID")
    export_parser.add_argument("--session", type=int, help="Session number (default: latest)")
    export_parser.add_argument(
        "--log-dir",
        default=os.getenv("CROSSING_LOG_DIR"),
        help="Directory holding move logs",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "export":
        cmd_export(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args):
    """Interactive terminal game."""
    from .move_log import open_store
    from .session import SessionManager

    manager = SessionManager(store=open_store(args.log_dir))
    play(manager, args.user)


def play(manager, user_id, read=input, write=print):
    """
    Run the text game loop until the player quits or input ends.

    Returns the session ID that was played.
    """
    from .engine_core import GameStatus
    from .move_log import export_csv

    session = manager.create_session(user_id)
    write(f"Session {session.session_number} for {user_id}")
    write("Get the cat, the rabbit and the vegetable to the right shore.")
    write(PLAY_HELP)
    write(session.engine.current_state().describe())

    while True:
        try:
            command = read("> ").strip().lower()
        except EOFError:
            break

        if not command:
            continue
        if command in ("quit", "q", "exit"):
            break
        if command in ("help", "h", "?"):
            write(PLAY_HELP)
            continue
        if command in ("log", "l"):
            records = manager.store.records(user_id, session.session_number)
            write(export_csv(records))
            continue

        if command in ("cross", "c"):
            result = session.engine.cross()
        elif command in ("reset", "r"):
            manager.restart_session(session.session_id)
            write(f"Starting over as session {session.session_number}")
            write(session.engine.current_state().describe())
            continue
        else:
            try:
                result = session.engine.load_or_unload(command)
            except ValueError as e:
                write(f"{e}. Type 'help' for commands.")
                continue

        if result.warning:
            write(f"! {result.warning}")
        state = result.new_state
        write(state.describe())
        if state.violation_reason:
            write(f"Rule broken: {state.violation_reason} Type 'reset' to try again.")
        elif state.status == GameStatus.WON:
            write(f"Solved in {state.move_count} crossings!")

    session_id = session.session_id
    manager.end_session(session_id)
    return session_id


def cmd_export(args):
    """Print a logged session as CSV."""
    from .move_log import JsonLinesMoveLogStore, export_csv

    if not args.log_dir:
        print("Error: --log-dir (or CROSSING_LOG_DIR) is required")
        sys.exit(1)

    store = JsonLinesMoveLogStore(args.log_dir)
    session_number = args.session or store.latest_session_number(args.user)
    if not session_number:
        print(f"Error: No sessions logged for {args.user}")
        sys.exit(1)

    sys.stdout.write(export_csv(store.records(args.user, session_number)))


def cmd_serve(args):
    """Run the REST API under uvicorn."""
    import uvicorn
    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
