import importlib
import sys

import pytest

# run.py is imported as a module; start_server is patched so no networking starts.


@pytest.fixture()
def run_module():
    # Clean import each time (run.py reads VERSION once)
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


@pytest.fixture()
def fake_server(monkeypatch):
    calls = {}

    def fake_start_server(host, port, debug):
        calls.update(host=host, port=port, debug=debug)

    import delve.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", fake_start_server)
    return calls


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "Delve Dungeon Server" in out
    assert run_module.__version__ in out


def test_default_command_is_server(run_module):
    assert run_module.parse_args([]).command == "server"


def test_server_main_uses_env(monkeypatch, run_module, fake_server):
    monkeypatch.setenv("PORT", "5555")
    monkeypatch.setenv("HOST", "127.0.0.1")
    assert run_module.main(["server"]) == 0
    assert fake_server == {"host": "127.0.0.1", "port": 5555, "debug": False}


def test_flags_override_env(monkeypatch, run_module, fake_server):
    monkeypatch.setenv("PORT", "5555")
    run_module.main(["server", "--port", "6001", "--host", "0.0.0.0", "--debug"])
    assert fake_server["port"] == 6001
    assert fake_server["debug"] is True


def test_env_file_argument(tmp_path, run_module, fake_server):
    env_file = tmp_path / ".env"
    env_file.write_text("DELVE_LOG_LEVEL=info\n")
    run_module.main(["--env-file", str(env_file), "server"])
    assert "host" in fake_server


def test_create_character_and_list_runs(run_module, capsys):
    assert run_module.main(["create-character", "cli-player", "Aria", "--class", "mage"]) == 0
    out = capsys.readouterr().out
    assert "Aria" in out and "(mage)" in out

    assert run_module.main(["list-runs", "--player", "cli-player"]) == 0
    assert "[NO RUNS]" in capsys.readouterr().out


def test_invalid_class_rejected(run_module):
    with pytest.raises(SystemExit):
        run_module.parse_args(["create-character", "p1", "Bob", "--class", "bard"])
