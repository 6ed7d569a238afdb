"""Application settings: optional ``~/.japa/config.yaml`` plus JAPA_* environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from japa.core.mantras import Variant

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    home_dir: Path = Path.home() / ".japa"
    remote_url: str = ""
    remote_key: str = ""
    remote_table: str = "users"
    admins: Tuple[str, ...] = ()
    leaderboard_limit: int = 10
    default_variant: Variant = Variant.PRIMARY
    log_level: str = "INFO"

    @property
    def remote_enabled(self) -> bool:
        return bool(self.remote_url and self.remote_key)

    @property
    def progress_path(self) -> Path:
        return self.home_dir / "progress.json"

    @property
    def accounts_path(self) -> Path:
        return self.home_dir / "accounts.json"


def _parse_admins(raw: Any) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = [str(item) for item in raw]
    else:
        raise ValueError(f"admins: expected a list or comma-separated string, got {raw!r}")
    return tuple(item.strip() for item in items if item.strip())


def _parse_variant(raw: Any) -> Variant:
    try:
        return Variant(str(raw).strip().lower())
    except ValueError:
        choices = ", ".join(v.value for v in Variant)
        raise ValueError(f"default_variant: expected one of {choices}, got {raw!r}") from None


def _parse_log_level(raw: Any) -> str:
    level = str(raw).strip().upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"log_level: expected one of {', '.join(_LOG_LEVELS)}, got {raw!r}")
    return level


def _parse_limit(raw: Any) -> int:
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"leaderboard_limit: expected an integer, got {raw!r}") from None
    if limit <= 0:
        raise ValueError(f"leaderboard_limit: must be positive, got {limit}")
    return limit


def _apply(settings: Settings, values: Mapping[str, Any]) -> Settings:
    changes: Dict[str, Any] = {}
    if values.get("home_dir"):
        changes["home_dir"] = Path(str(values["home_dir"])).expanduser()
    for key in ("remote_url", "remote_key", "remote_table"):
        if values.get(key) is not None:
            changes[key] = str(values[key]).strip()
    if "admins" in values:
        changes["admins"] = _parse_admins(values["admins"])
    if values.get("leaderboard_limit") is not None:
        changes["leaderboard_limit"] = _parse_limit(values["leaderboard_limit"])
    if values.get("default_variant"):
        changes["default_variant"] = _parse_variant(values["default_variant"])
    if values.get("log_level"):
        changes["log_level"] = _parse_log_level(values["log_level"])
    return replace(settings, **changes)


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"{path.name}: invalid YAML: {e}") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected a mapping of settings")
    return raw


def _env_values(env: Mapping[str, str]) -> Dict[str, Any]:
    mapping = {
        "JAPA_HOME": "home_dir",
        "JAPA_REMOTE_URL": "remote_url",
        "JAPA_REMOTE_KEY": "remote_key",
        "JAPA_REMOTE_TABLE": "remote_table",
        "JAPA_ADMINS": "admins",
        "JAPA_LEADERBOARD_LIMIT": "leaderboard_limit",
        "JAPA_VARIANT": "default_variant",
        "JAPA_LOG_LEVEL": "log_level",
    }
    return {key: env[name] for name, key in mapping.items() if env.get(name)}


def load_settings(path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from defaults, then the config file, then the environment."""
    env = os.environ if env is None else env
    settings = Settings()
    if env.get("JAPA_HOME"):
        settings = replace(settings, home_dir=Path(env["JAPA_HOME"]).expanduser())

    config_path = Path(path) if path is not None else settings.home_dir / "config.yaml"
    settings = _apply(settings, _read_config_file(config_path))
    settings = _apply(settings, _env_values(env))
    logger.debug("Loaded settings from %s (remote %s)", config_path, "on" if settings.remote_enabled else "off")
    return settings
