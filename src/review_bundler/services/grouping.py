"""Resolve configured links against an archive and collect per-group stats."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from review_bundler.models.archive import ArchiveEntry
from review_bundler.models.errors import ArchiveFormatError
from review_bundler.models.grouping import GroupConfig, GroupStats, Operation, ResolvedFile
from review_bundler.models.run import ProcessingRun
from review_bundler.services.archive_reader import ArchiveReader
from review_bundler.services.resolver import resolve_entry
from review_bundler.utils.paths import basename, normalize_path

logger = logging.getLogger(__name__)

UPDATE_KEYWORDS = ("update", "modify")


def classify_operation(link: str) -> Operation:
    """Classify a link as an update when it mentions update/modify, else insert."""
    lowered = link.lower()
    if any(keyword in lowered for keyword in UPDATE_KEYWORDS):
        return Operation.UPDATE
    return Operation.INSERT


def _note(run: ProcessingRun | None, message: str, level: int = logging.INFO) -> None:
    logger.log(level, "%s", message)
    if run is not None:
        run.log(message)


def process_groups(
    configs: Iterable[GroupConfig],
    entries: Sequence[ArchiveEntry],
    reader: ArchiveReader,
    run: ProcessingRun | None = None,
) -> tuple[list[GroupStats], list[ResolvedFile]]:
    """Resolve every link of every group against the archive entries.

    Missing entries and unreadable entries are logged and skipped; they never
    abort the run.

    Args:
        configs: Group configurations in configuration order.
        entries: Archive listing, in listing order.
        reader: Reader that owns *entries*.
        run: Run whose log receives progress messages.

    Returns:
        Tuple of (stats per group, resolved files), both in configuration order.
    """
    all_stats: list[GroupStats] = []
    resolved: list[ResolvedFile] = []

    for config in configs:
        stats = GroupStats(name=config.group_name)
        all_stats.append(stats)

        _note(run, f"Processing folder: {config.group_name}")
        _note(run, f"Looking for files: {', '.join(config.links)}")

        for link in config.links:
            normalized_link = normalize_path(link)
            entry = resolve_entry(entries, normalized_link)
            if entry is None:
                _note(run, f"File not found: {normalized_link}", logging.WARNING)
                continue

            _note(run, f"Found file: {entry.path}")
            file_name = basename(normalized_link)

            try:
                content = reader.read_bytes(entry)
            except (ArchiveFormatError, OSError) as exc:
                _note(run, f"Error processing file {normalized_link}: {exc}", logging.ERROR)
                continue

            operation = classify_operation(normalized_link)
            resolved.append(
                ResolvedFile(
                    group_name=config.group_name,
                    file_name=file_name,
                    operation=operation,
                    content=content,
                    source_path=entry.path,
                )
            )
            stats.record(file_name, operation)
            _note(run, f"Successfully processed: {file_name} into {config.group_name}")

    return all_stats, resolved
