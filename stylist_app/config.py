"""Configuration helpers for the outfit recommendation engine."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Tunable limits of a recommendation run.

    Defaults are the engine's fixed constants; deployments override them
    through environment variables or ``config/environments/<env>.yaml``.
    """

    usage_cap: int = 2
    idle_window_seconds: float = 300.0
    min_confidence: float = 0.4
    shortlist_size: int = 8
    max_results: int = 6
    max_dress_candidates: int = 5
    max_pairings: int = 15
    random_seed: Optional[int] = None
    log_level: str = "INFO"
    environment: Optional[str] = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment variables win over the YAML file, which wins over the
        defaults. Values that cannot be parsed keep the default.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("STYLIST_CONFIG_DIR", "config/environments"))
        yaml_config: Dict[str, str] = {}

        if config_path:
            path: Optional[Path] = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)
        elif path:
            logger.warning("Config file %s not found, using defaults", path)

        def get_value(key: str) -> Optional[str]:
            return os.getenv(key.upper(), yaml_config.get(key))

        defaults = cls()
        values: Dict[str, Any] = {}
        for spec in fields(cls):
            if spec.name == "environment":
                continue
            raw = get_value(spec.name)
            if raw is None or raw == "":
                continue
            values[spec.name] = _coerce(spec.name, raw, getattr(defaults, spec.name))
        return cls(environment=env_name, **values)

    @staticmethod
    def _load_yaml_config(path: Path) -> Dict[str, str]:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: Dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.split(" #", 1)[0].strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config


_CASTS = {
    "usage_cap": int,
    "idle_window_seconds": float,
    "min_confidence": float,
    "shortlist_size": int,
    "max_results": int,
    "max_dress_candidates": int,
    "max_pairings": int,
    "random_seed": int,
    "log_level": lambda value: str(value).upper(),
}


def _coerce(key: str, raw: str, default: Any) -> Any:
    cast = _CASTS.get(key, str)
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid value %r for %s, falling back to %r", raw, key, default)
        return default
    if isinstance(value, (int, float)) and value < 0:
        logger.warning("Negative value %r for %s, falling back to %r", raw, key, default)
        return default
    return value


__all__ = ["EngineConfig"]
