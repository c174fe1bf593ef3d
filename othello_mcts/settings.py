from __future__ import annotations

import logging
import os
import pathlib
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

import tomli

from .search.planner import MCTSConfig

CONFIG_HOME = pathlib.Path(os.path.expanduser("~/.othello_mcts"))
CONFIG_PATH = CONFIG_HOME / "config.toml"
DEFAULTS_PATH = pathlib.Path(__file__).resolve().parent / "config" / "defaults.toml"

log = logging.getLogger(__name__)


class ConfigError(Exception):
    """Configuration file is unreadable or holds an invalid value."""


@dataclass
class SelfPlaySettings:
    games: int = 10
    workers: int = 2
    output: str = ""


@dataclass
class LoggingSettings:
    level: str = "INFO"
    file: bool = True


@dataclass
class Settings:
    mcts: MCTSConfig = field(default_factory=MCTSConfig)
    selfplay: SelfPlaySettings = field(default_factory=SelfPlaySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


def ensure_config() -> bool:
    """Create the user config from the packaged defaults. True if created."""
    CONFIG_HOME.mkdir(parents=True, exist_ok=True)
    if not CONFIG_PATH.exists():
        CONFIG_PATH.write_text(DEFAULTS_PATH.read_text(encoding="utf-8"), encoding="utf-8")
        log.info("Created default configuration at %s", CONFIG_PATH)
        return True
    return False


def load_config(path: Union[str, pathlib.Path, None] = None) -> dict:
    """Read a TOML config. Without a path, the user config or else the defaults."""
    if path is None:
        path = CONFIG_PATH if CONFIG_PATH.exists() else DEFAULTS_PATH
    try:
        with open(path, "rb") as f:
            return tomli.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}") from e
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"malformed config {path}: {e}") from e


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, Mapping):
        raise ConfigError(f"[{name}] must be a table")
    return value


def _get(table: Mapping[str, Any], section: str, key: str, kind: type, default: Any) -> Any:
    value = table.get(key, default)
    if kind is float and isinstance(value, int) and not isinstance(value, bool):
        value = float(value)
    if value is not None and (not isinstance(value, kind) or (kind is int and isinstance(value, bool))):
        raise ConfigError(f"{section}.{key} must be {kind.__name__}, got {value!r}")
    return value


def parse_settings(data: Mapping[str, Any]) -> Settings:
    m = _section(data, "mcts")
    sp = _section(data, "selfplay")
    lg = _section(data, "logging")
    base = MCTSConfig()
    try:
        mcts = MCTSConfig(
            iterations=_get(m, "mcts", "iterations", int, base.iterations),
            exploration=_get(m, "mcts", "exploration", float, base.exploration),
            temperature=_get(m, "mcts", "temperature", float, base.temperature),
            seed=_get(m, "mcts", "seed", int, None),
        )
    except ValueError as e:
        raise ConfigError(str(e)) from e
    selfplay = SelfPlaySettings(
        games=_get(sp, "selfplay", "games", int, 10),
        workers=_get(sp, "selfplay", "workers", int, 2),
        output=_get(sp, "selfplay", "output", str, ""),
    )
    logging_settings = LoggingSettings(
        level=_get(lg, "logging", "level", str, "INFO"),
        file=_get(lg, "logging", "file", bool, True),
    )
    if selfplay.games < 0 or selfplay.workers < 1:
        raise ConfigError("selfplay.games must be >= 0 and selfplay.workers >= 1")
    return Settings(mcts=mcts, selfplay=selfplay, logging=logging_settings)


def load_settings(path: Union[str, pathlib.Path, None] = None) -> Settings:
    return parse_settings(load_config(path))


def resolve_path(path: Optional[str]) -> Optional[pathlib.Path]:
    return pathlib.Path(os.path.expanduser(path)) if path else None
