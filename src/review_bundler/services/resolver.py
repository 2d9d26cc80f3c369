"""Locate the archive entry a configured link refers to."""

from __future__ import annotations

from collections.abc import Iterable

from review_bundler.models.archive import ArchiveEntry
from review_bundler.utils.paths import normalize_path, path_segments


def tail_matches(entry_path: str, search_path: str) -> bool:
    """Return True when *entry_path* ends with every segment of *search_path*.

    Segments are compared from the last one backwards for the length of the
    shorter path, so extra leading directories on either side are tolerated.
    """
    entry_segments = path_segments(entry_path)
    search_segments = path_segments(search_path)
    if not entry_segments or not search_segments:
        return False
    depth = min(len(entry_segments), len(search_segments))
    return entry_segments[-depth:] == search_segments[-depth:]


def resolve_entry(entries: Iterable[ArchiveEntry], search_path: str) -> ArchiveEntry | None:
    """Find the entry matching *search_path*.

    An exact path match wins; otherwise the first file entry in listing
    order whose trailing segments equal the search path's is returned.
    Directory markers never match.

    Args:
        entries: Archive entries in listing order.
        search_path: Link from the configuration, normalized or raw.

    Returns:
        The matching entry, or None when nothing matches.
    """
    target = normalize_path(search_path)
    if not target:
        return None

    candidates = [entry for entry in entries if not entry.is_directory]

    for entry in candidates:
        if entry.path == target:
            return entry

    for entry in candidates:
        if tail_matches(entry.path, target):
            return entry

    return None
