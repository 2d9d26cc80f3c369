"""Uniform read access to ZIP and TAR input archives."""

from __future__ import annotations

import io
import logging
import tarfile
import zlib
from abc import ABC, abstractmethod
from collections.abc import Iterator
from enum import StrEnum
from types import TracebackType
from zipfile import BadZipFile, ZipFile

from review_bundler.models.archive import ArchiveEntry
from review_bundler.models.errors import ArchiveFormatError, ValidationError
from review_bundler.utils.paths import normalize_path

logger = logging.getLogger(__name__)


class ArchiveKind(StrEnum):
    ZIP = "zip"
    TAR = "tar"


ZIP_CONTENT_TYPES = frozenset({"application/zip", "application/x-zip-compressed"})
TAR_CONTENT_TYPES = frozenset({"application/x-tar", "application/x-gtar"})

ZIP_SUFFIXES = (".zip",)
TAR_SUFFIXES = (".tar", ".tar.gz", ".tgz", ".tar.bz2", ".tbz2", ".tar.xz", ".txz")


def detect_archive_kind(filename: str | None, content_type: str | None = None) -> ArchiveKind:
    """Pick the archive kind from the file suffix, then the declared media type.

    Args:
        filename: Name of the uploaded file.
        content_type: Declared media type, if any.

    Returns:
        The detected archive kind.

    Raises:
        ValidationError: If neither the suffix nor the media type is supported.
    """
    name = normalize_path(filename or "").lower()
    if name.endswith(ZIP_SUFFIXES):
        return ArchiveKind.ZIP
    if name.endswith(TAR_SUFFIXES):
        return ArchiveKind.TAR

    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type in ZIP_CONTENT_TYPES:
        return ArchiveKind.ZIP
    if media_type in TAR_CONTENT_TYPES:
        return ArchiveKind.TAR

    raise ValidationError(
        f"Please select a valid ZIP or TAR file. Received: {filename or '(unnamed)'}"
    )


def _entry_from_name(raw_name: str, is_directory: bool, size: int, index: int) -> ArchiveEntry:
    path = normalize_path(raw_name)
    if is_directory or path.endswith("/"):
        return ArchiveEntry(
            path=path.rstrip("/"), is_directory=True, size_bytes=0, raw_name=raw_name, index=index
        )
    return ArchiveEntry(
        path=path, is_directory=False, size_bytes=size, raw_name=raw_name, index=index
    )


class ArchiveReader(ABC):
    """Read-only view over an in-memory archive."""

    kind: ArchiveKind

    @abstractmethod
    def list_entries(self) -> Iterator[ArchiveEntry]:
        """Yield archive entries lazily, in archive listing order."""

    @abstractmethod
    def read_bytes(self, entry: ArchiveEntry) -> bytes:
        """Return the decoded contents of *entry*.

        Raises:
            ArchiveFormatError: If the entry data cannot be decoded.
        """

    def iter_sizes(self) -> Iterator[tuple[ArchiveEntry, int]]:
        """Yield every entry with the byte length of its decoded contents.

        An entry that cannot be decoded is logged and reported with the size
        recorded in the archive listing.
        """
        for entry in self.list_entries():
            if entry.is_directory:
                yield entry, 0
                continue
            try:
                size = len(self.read_bytes(entry))
            except ArchiveFormatError as exc:
                logger.warning("Using listed size for %s: %s", entry.path, exc)
                size = entry.size_bytes
            yield entry, size

    def close(self) -> None:  # noqa: B027
        """Release resources held by the reader."""

    def __enter__(self) -> ArchiveReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class ZipArchiveReader(ArchiveReader):
    """ZIP reader backed by the central directory, so reads are random access."""

    kind = ArchiveKind.ZIP

    def __init__(self, data: bytes) -> None:
        try:
            self._archive = ZipFile(io.BytesIO(data))
        except (BadZipFile, OSError) as exc:
            raise ArchiveFormatError(f"Unable to read ZIP archive: {exc}") from exc
        self._infos = self._archive.infolist()

    def list_entries(self) -> Iterator[ArchiveEntry]:
        for index, info in enumerate(self._infos):
            entry = _entry_from_name(info.filename, info.is_dir(), info.file_size, index)
            if not entry.path:
                continue
            yield entry

    def read_bytes(self, entry: ArchiveEntry) -> bytes:
        if entry.is_directory:
            return b""
        # zipfile raises RuntimeError for encrypted entries read without a password.
        try:
            return self._archive.read(self._infos[entry.index])
        except (BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError) as exc:
            raise ArchiveFormatError(f"Unable to read {entry.path}: {exc}") from exc

    def close(self) -> None:
        self._archive.close()


class TarArchiveReader(ArchiveReader):
    """TAR reader.

    TAR has no central index, so listing is a forward scan over the member
    headers and every :meth:`read_bytes` call scans again up to the entry.
    """

    kind = ArchiveKind.TAR

    def __init__(self, data: bytes) -> None:
        self._data = data
        # Decode the first header eagerly so a bad stream fails at load time.
        with self._open() as archive:
            try:
                archive.next()
            except (tarfile.TarError, EOFError, zlib.error) as exc:
                raise ArchiveFormatError(f"Unable to read TAR archive: {exc}") from exc

    def _open(self) -> tarfile.TarFile:
        try:
            return tarfile.open(fileobj=io.BytesIO(self._data), mode="r|*")
        except (tarfile.TarError, EOFError, zlib.error) as exc:
            raise ArchiveFormatError(f"Unable to read TAR archive: {exc}") from exc

    def _scan(self) -> Iterator[tuple[int, tarfile.TarInfo, tarfile.TarFile]]:
        with self._open() as archive:
            index = 0
            while True:
                try:
                    member = archive.next()
                except (tarfile.TarError, EOFError, zlib.error) as exc:
                    raise ArchiveFormatError(f"Unable to read TAR archive: {exc}") from exc
                if member is None:
                    return
                yield index, member, archive
                index += 1

    @staticmethod
    def _member_entry(index: int, member: tarfile.TarInfo) -> ArchiveEntry | None:
        if not (member.isdir() or member.isfile()):
            logger.debug("Skipping non-regular TAR member %s", member.name)
            return None
        entry = _entry_from_name(member.name, member.isdir(), member.size, index)
        return entry if entry.path else None

    def list_entries(self) -> Iterator[ArchiveEntry]:
        for index, member, _ in self._scan():
            entry = self._member_entry(index, member)
            if entry is not None:
                yield entry

    def iter_sizes(self) -> Iterator[tuple[ArchiveEntry, int]]:
        """Decode every member during a single forward scan."""
        for index, member, archive in self._scan():
            entry = self._member_entry(index, member)
            if entry is None:
                continue
            if entry.is_directory:
                yield entry, 0
                continue
            try:
                handle = archive.extractfile(member)
                if handle is None:
                    size = 0
                else:
                    with handle:
                        size = len(handle.read())
            except (tarfile.TarError, EOFError, zlib.error) as exc:
                logger.warning("Using listed size for %s: %s", entry.path, exc)
                size = entry.size_bytes
            yield entry, size

    def read_bytes(self, entry: ArchiveEntry) -> bytes:
        if entry.is_directory:
            return b""
        for index, member, archive in self._scan():
            if index != entry.index:
                continue
            try:
                handle = archive.extractfile(member)
                if handle is None:
                    return b""
                with handle:
                    return handle.read()
            except (tarfile.TarError, EOFError, zlib.error) as exc:
                raise ArchiveFormatError(f"Unable to read {entry.path}: {exc}") from exc
        raise ArchiveFormatError(f"Entry {entry.path} is no longer present in the archive")


def open_archive(
    data: bytes, filename: str | None, content_type: str | None = None
) -> ArchiveReader:
    """Create the reader matching the uploaded file.

    Raises:
        ValidationError: If the file type is not supported.
        ArchiveFormatError: If the bytes cannot be parsed as the detected kind.
    """
    kind = detect_archive_kind(filename, content_type)
    if kind is ArchiveKind.TAR:
        return TarArchiveReader(data)
    return ZipArchiveReader(data)
