"""Runtime settings for the bundler.

Every setting can be overridden with an environment variable; a ``.env``
file in the working directory is loaded first.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_GROUP_KEYS: tuple[str, ...] = ("Review Test", "Review Text")
DEFAULT_OUTPUT_SUFFIX = "processed_files.zip"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved bundler settings.

    Attributes:
        log_level: Name of the logging level applied by ``configure_logging``.
        sanitize_group_names: Replace unsafe characters in group folder names.
        group_keys: JSON keys accepted for the group name, in priority order.
        output_suffix: Suffix appended to the batch id for the download name.
        output_dir: Directory the CLI writes the bundle into, if set.
    """

    log_level: str = "INFO"
    sanitize_group_names: bool = True
    group_keys: tuple[str, ...] = DEFAULT_GROUP_KEYS
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX
    output_dir: Path | None = None


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if not value:
        return default
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or default


def get_settings() -> Settings:
    """Return settings read from the current environment."""
    output_dir = os.getenv("REVIEW_BUNDLER_OUTPUT_DIR")
    return Settings(
        log_level=os.getenv("REVIEW_BUNDLER_LOG_LEVEL", "INFO").upper(),
        sanitize_group_names=_env_flag("REVIEW_BUNDLER_SANITIZE_GROUP_NAMES", True),
        group_keys=_env_list("REVIEW_BUNDLER_GROUP_KEYS", DEFAULT_GROUP_KEYS),
        output_suffix=os.getenv("REVIEW_BUNDLER_OUTPUT_SUFFIX") or DEFAULT_OUTPUT_SUFFIX,
        output_dir=Path(output_dir).expanduser().resolve() if output_dir else None,
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging for a frontend entry point."""
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
