import itertools
import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# In-memory database; must be set before the app module is imported
os.environ["DATABASE_URL"] = "sqlite://"

from delve import create_app, db, socketio  # noqa: E402
from delve.models.models import Character  # noqa: E402
from delve.services.dungeon_service import DungeonService  # noqa: E402
from delve.services.persistence import SqlCharacterStore, SqlRunSink  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        db.session.remove()
        ctx.pop()


@pytest.fixture()
def make_character():
    """Create and commit a Character; keyword overrides map onto model columns."""

    def _make(player_id="p1", name="Hero", char_class="warrior", **stats):
        char = Character(player_id=player_id, name=name, char_class=char_class, **stats)
        db.session.add(char)
        db.session.commit()
        return char

    return _make


@pytest.fixture()
def service():
    """DungeonService writing outcomes inline with predictable floor seeds."""
    seeds = itertools.count(1000)
    return DungeonService(
        characters=SqlCharacterStore(),
        runs=SqlRunSink(),
        seed_source=lambda: next(seeds),
    )


@pytest.fixture()
def socket_client(test_app, monkeypatch):
    # Outcome writes run inline so assertions see them immediately
    monkeypatch.setattr(test_app.extensions["delve"], "dispatch", lambda fn, *a, **k: fn(*a, **k))
    client = socketio.test_client(test_app, flask_test_client=test_app.test_client())
    yield client
    if client.is_connected():
        client.disconnect()
