import json

from delve import logging_utils
from delve.logging_utils import get_logger


def test_key_value_format(capsys, monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    get_logger("test.kv").info(event="dungeon_started", dungeon_id="run 1", depth=3, skipped=None)
    out = capsys.readouterr().out.strip()
    assert out.startswith("level=info ts=")
    assert "event=dungeon_started" in out
    assert "dungeon_id=run_1" in out
    assert "depth=3" in out
    assert "skipped" not in out
    assert "logger=test.kv" in out


def test_json_format(capsys, monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", True)
    get_logger("test.json").warn(event="invalid_payload", field="roomId")
    rec = json.loads(capsys.readouterr().out.strip())
    assert rec["level"] == "warn"
    assert rec["logger"] == "test.json"
    assert rec["field"] == "roomId"
    assert isinstance(rec["ts"], int)


def test_level_threshold(capsys, monkeypatch):
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["warn"])
    log = get_logger("test.threshold")
    log.debug(event="hidden")
    log.info(event="hidden")
    assert capsys.readouterr().out == ""


def test_errors_go_to_stderr(capsys, monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    get_logger("test.err").error(event="run_outcome_failed", run_id="x")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "event=run_outcome_failed" in captured.err


def test_loggers_are_cached():
    assert get_logger("same") is get_logger("same")
