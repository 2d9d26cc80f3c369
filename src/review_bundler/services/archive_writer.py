"""Serialize resolved files into the grouped output ZIP."""

from __future__ import annotations

import io
from collections.abc import Iterable
from zipfile import ZIP_DEFLATED, ZipFile

from review_bundler.config import Settings, get_settings
from review_bundler.models.errors import ValidationError
from review_bundler.models.grouping import ResolvedFile
from review_bundler.utils.paths import sanitize_batch_id

OutputArchive = dict[str, dict[str, bytes]]


def build_output_archive(resolved: Iterable[ResolvedFile]) -> OutputArchive:
    """Bucket resolved files by group.

    A later file with the same basename in the same group replaces the
    earlier one.
    """
    output: OutputArchive = {}
    for item in resolved:
        output.setdefault(item.group_name, {})[item.file_name] = item.content
    return output


def serialize_output_archive(output: OutputArchive) -> bytes:
    """Write one directory per group and its files into a ZIP blob."""
    buffer = io.BytesIO()
    with ZipFile(buffer, mode="w", compression=ZIP_DEFLATED) as archive:
        for group_name, files in output.items():
            archive.writestr(f"{group_name}/", b"")
            for file_name, content in files.items():
                archive.writestr(f"{group_name}/{file_name}", content)
    return buffer.getvalue()


def write_output_archive(resolved: Iterable[ResolvedFile]) -> bytes:
    """Build and serialize the output archive for *resolved*."""
    return serialize_output_archive(build_output_archive(resolved))


def build_download_name(batch_id: str | None, settings: Settings | None = None) -> str:
    """Return the download filename for a batch.

    Raises:
        ValidationError: If the batch identifier is missing or blank.
    """
    if batch_id is None or not batch_id.strip():
        raise ValidationError("Please enter a batch identifier before downloading")
    settings = settings or get_settings()
    return f"{sanitize_batch_id(batch_id)}_{settings.output_suffix}"
