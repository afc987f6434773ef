"""
project: Delve
module: __init__.py
License: MIT

Module-level Flask app, SQLAlchemy handle and Socket.IO server.

Settings come from the environment (optionally a .env file). Without
DATABASE_URL the run history lives in ``instance/delve.db``. The dungeon
service is stored on ``app.extensions["delve"]`` for the event handlers.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy

load_dotenv()

app = Flask(__name__, instance_relative_config=True)
os.makedirs(app.instance_path, exist_ok=True)

database_url = os.getenv("DATABASE_URL")
if not database_url:
    database_url = f"sqlite:///{(Path(app.instance_path) / 'delve.db').as_posix()}"

app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    SQLALCHEMY_DATABASE_URI=database_url,
    SQLALCHEMY_TRACK_MODIFICATIONS=False,
    DELVE_MAX_DEPTH=int(os.getenv("DELVE_MAX_DEPTH", "10")),
    DELVE_ENCOUNTER_CHANCE=float(os.getenv("DELVE_ENCOUNTER_CHANCE", "0.4")),
    DELVE_FLEE_CHANCE=float(os.getenv("DELVE_FLEE_CHANCE", "0.5")),
)

engine_opts = {}
if database_url.startswith("sqlite:///"):
    # Run outcomes are written from socketio background tasks
    engine_opts["connect_args"] = {"timeout": 10, "check_same_thread": False}
db = SQLAlchemy(app, session_options={"expire_on_commit": False}, engine_options=engine_opts)

# async_mode None lets Flask-SocketIO pick eventlet, gevent or threading
socketio = SocketIO(
    app,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
    cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
    ping_interval=20,
    ping_timeout=10,
)

# These modules import app/db/socketio back from this package
from delve.models import models as _models  # noqa: F401,E402
from delve.services.dungeon_service import DungeonService  # noqa: E402
from delve.services.persistence import SqlCharacterStore, SqlRunSink  # noqa: E402

app.extensions["delve"] = DungeonService(
    characters=SqlCharacterStore(),
    runs=SqlRunSink(app),
    dispatch=socketio.start_background_task,
    max_depth=app.config["DELVE_MAX_DEPTH"],
    encounter_chance=app.config["DELVE_ENCOUNTER_CHANCE"],
    flee_chance=app.config["DELVE_FLEE_CHANCE"],
)

# Registers the @socketio.on handlers
from delve.websockets import dungeon as _ws_dungeon  # noqa: F401,E402


def create_app():
    """Return the Flask app instance with its tables created (idempotent)."""
    with app.app_context():
        db.create_all()
    return app
