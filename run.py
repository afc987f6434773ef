"""Delve command line.

    python run.py [--env-file PATH] server [--host H] [--port P] [--db URI] [--debug]
    python run.py create-character PLAYER_ID NAME [--class CLASS]
    python run.py list-runs [--player PLAYER_ID] [--limit N]

With no subcommand the dungeon server starts. Flags win over environment
variables; a .env file is loaded first when present.
"""

import argparse
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()

# Plain output when stdout is captured or piped
_COLOR_ENABLED = sys.stdout.isatty()

CHARACTER_CLASSES = ("warrior", "mage", "rogue", "paladin")
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000


def _load_version() -> str:
    version_file = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(version_file, encoding="utf-8") as fh:
            return fh.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()

ENV_HELP = dedent(
    """
    Environment:
      HOST, PORT              Bind address and port for `server` (0.0.0.0:5000)
      DATABASE_URL            SQLAlchemy URI (default sqlite file in instance/)
      DELVE_MAX_DEPTH         Floor on which a run completes (10)
      DELVE_ENCOUNTER_CHANCE  Encounter roll for an uncleared room (0.4)
      DELVE_FLEE_CHANCE       Flee success chance (0.5)
      DELVE_LOG_LEVEL         debug | info | warn | error (info)
      DELVE_LOG_JSON          1 for JSON-lines session logs

    Examples:
      python run.py
      python run.py server --host 127.0.0.1 --port 8000 --db sqlite:///instance/dev.db
      python run.py create-character p1 Aria --class mage
      python run.py list-runs --player p1 --limit 5
    """
)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="Delve",
        description="Delve Dungeon Server: real-time dungeon runs over Flask-SocketIO.",
        epilog=ENV_HELP,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--env-file", dest="env_file", help="Load this .env file instead of ./.env")
    parser.add_argument("--version", action="version", version=f"Delve Dungeon Server {__version__}")

    commands = parser.add_subparsers(dest="command")

    server = commands.add_parser("server", help="Run the Socket.IO dungeon server (default)")
    server.add_argument("--host", help=f"Interface to bind (env HOST, default {DEFAULT_HOST})")
    server.add_argument("--port", type=int, help=f"Port to listen on (env PORT, default {DEFAULT_PORT})")
    server.add_argument("--db", dest="db_uri", help="Database URI (env DATABASE_URL)")
    server.add_argument("--debug", action="store_true", help="Flask debug mode with reloader and tracebacks")

    create = commands.add_parser("create-character", help="Add a character a player can start runs with")
    create.add_argument("player_id", help="Owning player id")
    create.add_argument("name", help="Character name")
    create.add_argument(
        "--class",
        dest="char_class",
        choices=CHARACTER_CLASSES,
        default="warrior",
        help="Class; selects the on-hit status abilities (default warrior)",
    )

    runs = commands.add_parser("list-runs", help="Print recorded runs, newest first")
    runs.add_argument("--player", dest="player_id", help="Only runs for this player id")
    runs.add_argument("--limit", type=int, default=20, help="Maximum rows (default 20)")

    args = parser.parse_args(argv or ["server"])
    if args.command is None:
        args.command = "server"
    return args


def _create_character(args) -> int:
    from delve import create_app, db
    from delve.models.models import Character

    app = create_app()
    with app.app_context():
        char = Character(player_id=args.player_id, name=args.name, char_class=args.char_class)
        db.session.add(char)
        db.session.commit()
        print(f"Created character {char.id} '{char.name}' ({char.char_class}) for player {char.player_id}")
    return 0


def _list_runs(args) -> int:
    from delve import create_app
    from delve.models.models import DungeonRun

    app = create_app()
    with app.app_context():
        query = DungeonRun.query
        if args.player_id:
            query = query.filter_by(player_id=args.player_id)
        rows = query.order_by(DungeonRun.created_at.desc()).limit(args.limit).all()
        if not rows:
            print("[NO RUNS]")
            return 0
        for run in rows:
            print(
                f"{run.id}  player={run.player_id}  char={run.character_id}  status={run.status:<9}"
                f"  depth={run.depth:>2}  gold={run.gold}  xp={run.xp}  items={len(run.items)}"
            )
    return 0


def _paint(text, color) -> str:
    return f"{color}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else str(text)


def _banner(rows) -> str:
    rule = _paint("-" * 44, Fore.MAGENTA)
    lines = [rule, "  " + _paint("Delve Dungeon Server", Fore.CYAN + Style.BRIGHT), rule]
    for key, val in rows:
        lines.append(f"  {_paint(key.ljust(11), Fore.YELLOW)} {_paint(val, Fore.GREEN)}")
    lines.append(rule)
    return "\n".join(lines) + "\n"


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    # .env never overrides variables already exported in the shell
    load_dotenv(args.env_file) if args.env_file else load_dotenv()

    if args.command == "create-character":
        return _create_character(args)
    if args.command == "list-runs":
        return _list_runs(args)

    host = args.host or os.getenv("HOST", DEFAULT_HOST)
    port = int(args.port or os.getenv("PORT", DEFAULT_PORT))
    debug = bool(args.debug or os.getenv("FLASK_DEBUG") == "1")
    # The app module reads DATABASE_URL at import time
    if args.db_uri:
        os.environ["DATABASE_URL"] = args.db_uri
    db_label = os.getenv("DATABASE_URL") or "instance/delve.db"

    def _on_sigint(signum, frame):
        print("\n[INFO] Shutting down Delve...")
        sys.exit(0)

    signal.signal(signal.SIGINT, _on_sigint)

    from delve.logging_utils import log
    from delve.server import start_server

    print(
        _banner(
            [
                ("Version", __version__),
                ("Listening", f"{host}:{port}"),
                ("Database", db_label),
                ("Max depth", os.getenv("DELVE_MAX_DEPTH", "10")),
                ("Debug", "on" if debug else "off"),
            ]
        )
    )
    log.info(event="startup", host=host, port=port, db=db_label, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
