"""Configuration utilities for mirrorlist runs.

This module reads environment variables (optionally from an `.env` file) and
produces an application configuration object consumed across the project.

Supported keys: `LOG_DIR`, `LOG_LEVEL`, `APP_NAME` and
`MIRRORLIST_SOURCE_URL`. None of them are required.

Usage example:

    from mirrorlist.config import load_config

    config = load_config()
    configure_logging(config)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_ENV_FILE = REPO_ROOT / ".env"
DEFAULT_SOURCE_URL = "https://archlinux.org/mirrorlist/all"


def _load_env_file(path: Path) -> Dict[str, str]:
    """Parse a dotenv-style file into a dictionary."""
    if not path.exists():
        return {}

    data: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip().strip("\"'")
    return data


@dataclass(frozen=True)
class AppConfig:
    """Application-level configuration values.

    ``log_directory`` is None when no per-run log file should be written.
    """

    log_directory: Optional[Path] = None
    log_level: str = "INFO"
    app_name: str = "mirrorlist"
    source_url: str = DEFAULT_SOURCE_URL


def _merge_envs(dotenv_values: Mapping[str, str], env: MutableMapping[str, str]) -> Dict[str, str]:
    """Merge dotenv values with the current environment, preferring os.environ."""
    merged = dict(dotenv_values)
    merged.update(env)  # os.environ wins
    return merged


def _resolve_log_directory(raw_value: Optional[str]) -> Optional[Path]:
    if not raw_value:
        return None
    log_directory = Path(raw_value)
    if not log_directory.is_absolute():
        log_directory = REPO_ROOT / log_directory
    return log_directory


def load_config(env_file: Optional[Path] = None) -> AppConfig:
    """Load configuration values using environment defaults.

    Raises:
        ValueError: If ``LOG_LEVEL`` is not a known logging level name.
    """
    target_file = env_file or DEFAULT_ENV_FILE
    dotenv_values = _load_env_file(target_file)
    merged = _merge_envs(dotenv_values, os.environ)

    log_level = merged.get("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"LOG_LEVEL must be a logging level name, got {log_level!r}.")

    source_url = (merged.get("MIRRORLIST_SOURCE_URL") or DEFAULT_SOURCE_URL).rstrip("/")

    return AppConfig(
        log_directory=_resolve_log_directory(merged.get("LOG_DIR")),
        log_level=log_level,
        app_name=merged.get("APP_NAME", "mirrorlist"),
        source_url=source_url,
    )


__all__ = ["AppConfig", "load_config", "REPO_ROOT", "DEFAULT_SOURCE_URL"]
