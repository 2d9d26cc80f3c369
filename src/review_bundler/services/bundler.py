"""End-to-end bundling run: config + archive in, grouped ZIP out."""

from __future__ import annotations

import logging

from review_bundler.config import Settings, get_settings
from review_bundler.models.archive import ArchiveEntry, ArchiveInspection
from review_bundler.models.errors import BundleError, ValidationError
from review_bundler.models.grouping import BundleResult
from review_bundler.models.run import ProcessingRun
from review_bundler.services.archive_reader import open_archive
from review_bundler.services.archive_writer import build_download_name, write_output_archive
from review_bundler.services.config_loader import load_group_configs
from review_bundler.services.grouping import process_groups
from review_bundler.services.tree import build_tree, count_files

logger = logging.getLogger(__name__)


def bundle_archive(
    archive_data: bytes | None,
    archive_name: str | None,
    config_data: bytes | str | None,
    batch_id: str | None = None,
    archive_content_type: str | None = None,
    run: ProcessingRun | None = None,
    settings: Settings | None = None,
) -> BundleResult:
    """Regroup an archive according to a JSON configuration.

    Args:
        archive_data: Raw archive bytes.
        archive_name: Uploaded archive filename, used to pick ZIP or TAR.
        config_data: Raw JSON configuration.
        batch_id: Operator supplied batch identifier for the download name.
        archive_content_type: Declared media type of the archive.
        run: Run context receiving status transitions and log lines.
        settings: Settings to apply, defaults to the environment.

    Returns:
        BundleResult with per-group stats, resolved files and the output ZIP.

    Raises:
        ValidationError: If inputs are missing or rejected.
        ArchiveFormatError: If the archive cannot be decoded.
        RunInProgressError: If *run* is already processing.
    """
    run = run or ProcessingRun()
    settings = settings or get_settings()
    run.start()

    try:
        if not archive_data or config_data is None:
            raise ValidationError("Please upload both archive and JSON files")

        configs = load_group_configs(config_data, settings=settings, run=run)
        run.log("JSON config loaded successfully")

        with open_archive(archive_data, archive_name, archive_content_type) as reader:
            entries = list(reader.list_entries())
            available = [entry.path for entry in entries if not entry.is_directory]
            run.log(
                f"{reader.kind.upper()} file loaded. Available files: {', '.join(available)}"
            )
            stats, resolved = process_groups(configs, entries, reader, run=run)

        archive_bytes = write_output_archive(resolved)
        download_name = build_download_name(batch_id, settings) if batch_id is not None else None
        run.log("ZIP file generated successfully")
    except BundleError as exc:
        logger.warning("Bundling %s failed: %s", archive_name, exc)
        run.fail(str(exc))
        raise
    except Exception as exc:
        logger.exception("Unexpected failure while bundling %s", archive_name)
        run.fail(f"Unexpected error: {exc}")
        raise

    run.succeed()
    return BundleResult(
        stats=stats,
        resolved=resolved,
        archive_bytes=archive_bytes,
        download_name=download_name,
        log=list(run.log_lines),
    )


def inspect_archive(
    archive_data: bytes,
    archive_name: str | None,
    content_type: str | None = None,
) -> ArchiveInspection:
    """Build the display tree for an archive.

    Every file entry is decoded so the tree reports actual byte lengths. An
    entry that cannot be decoded keeps the size from the archive listing.

    Raises:
        ValidationError: If the file type is not supported.
        ArchiveFormatError: If the archive cannot be decoded.
    """
    with open_archive(archive_data, archive_name, content_type) as reader:
        entries: list[ArchiveEntry] = []
        sizes: dict[int, int] = {}
        for entry, size in reader.iter_sizes():
            entries.append(entry)
            sizes[entry.index] = size

    tree = build_tree(entries, size_of=lambda entry: sizes[entry.index])

    return ArchiveInspection(
        filename=archive_name or "",
        size_bytes=len(archive_data),
        file_count=count_files(tree),
        tree=tree,
    )
