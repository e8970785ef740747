"""
Run settings.

Layered lowest first: defaults below, an optional YAML file, JSON_COLLECT_*
environment variables (a .env in the working directory is picked up), and
finally whatever the command line sets explicitly.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

import dotenv
import yaml

# ── defaults ─────────────────────────────────────────────────────────────────
ENV_PREFIX      = "JSON_COLLECT_"
LOG_LEVELS      = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
TRUE_VALUES     = {"1", "true", "yes", "on"}
FALSE_VALUES    = {"0", "false", "no", "off"}
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Settings:
    follow_symlinks: bool = True
    progress: bool = False
    log_file: Path | None = None
    log_level: str = "WARNING"


def load_yaml(path: Path) -> Dict[str, Any]:
    with path.open(encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"{path}: not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(data).__name__}")
    return data


def parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"{name}: expected a boolean, got {value!r}")


def parse_level(name: str, value: Any) -> str:
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"{name}: expected one of {', '.join(LOG_LEVELS)}, got {value!r}")
    return level


def parse_path(name: str, value: Any) -> Path | None:
    if value is None or value == "":
        return None
    if not isinstance(value, (str, os.PathLike)):
        raise ValueError(f"{name}: expected a file path, got {value!r}")
    return Path(value)


def coerce(name: str, key: str, value: Any) -> Any:
    if key in ("follow_symlinks", "progress"):
        return parse_bool(name, value)
    if key == "log_level":
        return parse_level(name, value)
    if key == "log_file":
        return parse_path(name, value)
    raise ValueError(f"{name}: unknown setting")


def from_mapping(base: Settings, data: Mapping[str, Any], source: str) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise ValueError(f"{source}: unknown setting(s): {', '.join(unknown)}")
    return replace(base, **{k: coerce(f"{source}:{k}", k, v) for k, v in data.items()})


def from_env(base: Settings, env: Mapping[str, str]) -> Settings:
    values = {}
    for f in fields(Settings):
        var = ENV_PREFIX + f.name.upper()
        if var in env:
            values[f.name] = coerce(var, f.name, env[var])
    return replace(base, **values)


def load_settings(config_file: Path | None = None,
                  env: Mapping[str, str] | None = None,
                  **overrides: Any) -> Settings:
    """
    Build the effective settings for one run.

    *overrides* are the command-line values; a None override means "not
    given" and leaves the lower layers alone.
    """
    if env is None:
        dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))
        env = os.environ

    settings = Settings()
    if config_file is not None:
        settings = from_mapping(settings, load_yaml(Path(config_file)), str(config_file))
    settings = from_env(settings, env)
    given = {k: v for k, v in overrides.items() if v is not None}
    return from_mapping(settings, given, "command line")
