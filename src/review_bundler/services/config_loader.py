"""Parse the JSON group configuration."""

from __future__ import annotations

import json
import logging
from pathlib import PurePosixPath
from typing import Any

from review_bundler.config import Settings, get_settings
from review_bundler.models.errors import ValidationError
from review_bundler.models.grouping import GroupConfig
from review_bundler.models.run import ProcessingRun
from review_bundler.utils.paths import normalize_path, sanitize_group_name

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPES = frozenset({"application/json", "text/json"})
LINKS_KEY = "Links"


def is_json_upload(filename: str | None, content_type: str | None = None) -> bool:
    """Return True when the upload looks like a JSON configuration file."""
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type in JSON_CONTENT_TYPES:
        return True
    return PurePosixPath(normalize_path(filename or "")).suffix.lower() == ".json"


def _decode(raw: bytes | str) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ValidationError("Configuration file is not valid UTF-8 text") from exc


def _skip(run: ProcessingRun | None, message: str) -> None:
    logger.warning("%s", message)
    if run is not None:
        run.log(message)


def _group_label(item: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in item:
            return item[key]
    return None


def parse_group_config(
    item: Any,
    position: int,
    settings: Settings | None = None,
    run: ProcessingRun | None = None,
) -> GroupConfig | None:
    """Validate one configuration element.

    Returns None (after logging why) for malformed elements.
    """
    settings = settings or get_settings()

    if not isinstance(item, dict):
        _skip(run, f"Skipping configuration entry {position}: expected an object")
        return None

    raw_name = _group_label(item, settings.group_keys)
    if not isinstance(raw_name, str) or not raw_name.strip():
        _skip(run, f"Skipping configuration entry {position}: missing group name")
        return None

    links = item.get(LINKS_KEY)
    if not isinstance(links, list):
        _skip(run, f"Skipping group {raw_name!r}: '{LINKS_KEY}' must be an array")
        return None

    valid_links: list[str] = []
    for link in links:
        if not isinstance(link, str):
            _skip(run, f"Ignoring non-string link in group {raw_name!r}: {link!r}")
            continue
        valid_links.append(link)

    group_name = sanitize_group_name(raw_name) if settings.sanitize_group_names else raw_name
    return GroupConfig(group_name=group_name, raw_name=raw_name, links=tuple(valid_links))


def load_group_configs(
    raw: bytes | str,
    settings: Settings | None = None,
    run: ProcessingRun | None = None,
) -> list[GroupConfig]:
    """Parse the configuration array into group configs.

    Args:
        raw: JSON document, as bytes or text.
        settings: Settings to apply, defaults to the environment.
        run: Run whose log receives skip messages.

    Returns:
        Valid group configs in document order.

    Raises:
        ValidationError: If the document is not JSON or not a top-level array.
    """
    settings = settings or get_settings()
    try:
        document = json.loads(_decode(raw))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Configuration file is not valid JSON: {exc}") from exc

    if not isinstance(document, list):
        raise ValidationError("Configuration JSON must be an array of group objects")

    configs: list[GroupConfig] = []
    for position, item in enumerate(document):
        config = parse_group_config(item, position, settings, run)
        if config is not None:
            configs.append(config)
    return configs
