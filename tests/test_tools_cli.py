from __future__ import annotations

import logging

import orjson
import pytest

from othello_mcts import settings
from othello_mcts.search.planner import MCTSConfig
from othello_mcts.selfplay.runner import run_games
from othello_mcts.tools import perft_cli, selfplay_cli


@pytest.fixture
def quiet_logging(monkeypatch):
    # setup_logging would replace the root handlers pytest captures through
    monkeypatch.setattr(selfplay_cli, "setup_logging", lambda **kw: None)
    monkeypatch.setattr(perft_cli, "setup_logging", lambda **kw: None)


@pytest.fixture
def user_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    monkeypatch.setattr(settings, "CONFIG_HOME", home)
    monkeypatch.setattr(settings, "CONFIG_PATH", home / "config.toml")
    return home


def test_selfplay_cli_writes_results(tmp_path, quiet_logging, user_home):
    cfg = tmp_path / "cfg.toml"
    cfg.write_text('[mcts]\niterations = 1\n\n[logging]\nfile = false\n', encoding="utf-8")
    out = tmp_path / "games.json"
    selfplay_cli.main(["--config", str(cfg), "--games", "2", "--workers", "1", "--first-seed", "4", "--output", str(out)])

    data = orjson.loads(out.read_bytes())
    expected = run_games(2, 1, MCTSConfig(iterations=1), first_seed=4)
    assert [g["seed"] for g in data["games"]] == [4, 5]
    assert [g["record"] for g in data["games"]] == [rec for _, rec, _ in expected]
    assert sum(data["tally"].values()) == 2
    assert data["config"]["iterations"] == 1
    # an explicit config file leaves the user config alone
    assert not settings.CONFIG_PATH.exists()


def test_selfplay_cli_creates_user_config(quiet_logging, user_home):
    selfplay_cli.main(["--games", "0", "--workers", "1"])
    assert settings.CONFIG_PATH.exists()
    assert settings.CONFIG_PATH.read_text(encoding="utf-8") == settings.DEFAULTS_PATH.read_text(encoding="utf-8")


def test_selfplay_cli_bad_config_exits(tmp_path, quiet_logging, user_home):
    cfg = tmp_path / "broken.toml"
    cfg.write_text("[mcts\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        selfplay_cli.main(["--config", str(cfg)])
    assert exc.value.code == 1


def test_perft_cli_reports_count(quiet_logging, caplog):
    with caplog.at_level(logging.INFO, logger="othello_mcts.tools.perft_cli"):
        perft_cli.main(["--depth", "1", "--position", "d3"])
    assert any("perft(d=1)=3 " in r.getMessage() for r in caplog.records)


def test_perft_cli_rejects_bad_position(quiet_logging):
    with pytest.raises(SystemExit) as exc:
        perft_cli.main(["--depth", "1", "--position", "d3a1"])
    assert exc.value.code == 1
