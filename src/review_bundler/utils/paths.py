"""Path normalization helpers shared by the reader, resolver and writer."""

from __future__ import annotations

import re

_MULTI_SLASH = re.compile(r"/{2,}")
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def normalize_path(path: str) -> str:
    """Return *path* with forward slashes, no leading slash and no empty segments.

    Backslashes become ``/``, leading slashes are stripped and runs of slashes
    are collapsed into one. The function never fails and is idempotent.
    """
    normalized = path.replace("\\", "/").lstrip("/")
    return _MULTI_SLASH.sub("/", normalized)


def path_segments(path: str) -> list[str]:
    """Split a path into its normalized segments."""
    normalized = normalize_path(path)
    if not normalized:
        return []
    return normalized.split("/")


def basename(path: str) -> str:
    """Return the last segment of *path*, or "" for a trailing slash."""
    return normalize_path(path).rpartition("/")[2]


def sanitize_group_name(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_-]`` with ``_``."""
    return _UNSAFE_NAME_CHARS.sub("_", name)


def sanitize_batch_id(batch_id: str) -> str:
    return _UNSAFE_NAME_CHARS.sub("_", batch_id.strip())
