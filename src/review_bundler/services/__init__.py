"""Services"""

from review_bundler.services.archive_reader import (
    ArchiveKind,
    ArchiveReader,
    TarArchiveReader,
    ZipArchiveReader,
    detect_archive_kind,
    open_archive,
)
from review_bundler.services.archive_writer import build_download_name, write_output_archive
from review_bundler.services.bundler import bundle_archive, inspect_archive
from review_bundler.services.config_loader import load_group_configs
from review_bundler.services.grouping import classify_operation, process_groups
from review_bundler.services.resolver import resolve_entry
from review_bundler.services.tree import build_tree

__all__ = [
    "ArchiveKind",
    "ArchiveReader",
    "TarArchiveReader",
    "ZipArchiveReader",
    "build_download_name",
    "build_tree",
    "bundle_archive",
    "classify_operation",
    "detect_archive_kind",
    "inspect_archive",
    "load_group_configs",
    "open_archive",
    "process_groups",
    "resolve_entry",
    "write_output_archive",
]
