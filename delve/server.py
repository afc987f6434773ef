"""
project: Delve
module: server.py
License: MIT

Process bootstrap for the dungeon server: tables, log handlers and the
blocking Socket.IO loop.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from delve import app, db, socketio

LOG_FILE = "delve.log"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Create tables, attach log handlers, then block in ``socketio.run``.

    ``debug`` turns on the Werkzeug reloader and interactive tracebacks and
    lowers the stdlib log level to DEBUG.
    """
    with app.app_context():
        db.create_all()
    log_path = configure_logging(logging.DEBUG if debug else logging.INFO)
    print(f"[INFO] Delve listening on {host}:{port} (async_mode={socketio.async_mode}, log={log_path})")
    try:
        socketio.run(app, host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Delve stopped (Ctrl+C)")
        sys.exit(0)


def configure_logging(level=logging.INFO, log_dir=None):
    """Send stdlib logging (Flask, Werkzeug, Engine.IO) to the console and a rotating file.

    The file lives in the instance folder unless ``log_dir`` is given.
    Handlers already on the root logger are replaced. Returns the file path.
    """
    log_dir = log_dir or app.instance_path
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, LOG_FILE)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [
        RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=5),
        logging.StreamHandler(),
    ]
    root = logging.getLogger()
    root.setLevel(level)
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return log_path
