from __future__ import annotations

import io
import tarfile
from collections.abc import Callable, Iterable
from zipfile import ZIP_DEFLATED, ZipFile

import pytest

ArchiveFactory = Callable[[Iterable[tuple[str, bytes]]], bytes]


def _create_zip_bytes(entries: Iterable[tuple[str, bytes]]) -> bytes:
    buffer = io.BytesIO()
    with ZipFile(buffer, "w", ZIP_DEFLATED) as archive:
        for name, data in entries:
            archive.writestr(name, data)
    return buffer.getvalue()


def _create_tar_bytes(entries: Iterable[tuple[str, bytes]]) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w") as archive:
        for name, data in entries:
            info = tarfile.TarInfo(name=name.rstrip("/"))
            if name.endswith("/"):
                info.type = tarfile.DIRTYPE
                archive.addfile(info)
                continue
            info.size = len(data)
            archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture
def make_zip() -> ArchiveFactory:
    """Build an in-memory ZIP from (name, data) pairs; names ending in '/' are folders."""
    return _create_zip_bytes


@pytest.fixture
def make_tar() -> ArchiveFactory:
    """Build an in-memory TAR from (name, data) pairs; names ending in '/' are folders."""
    return _create_tar_bytes


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep bundler settings at their defaults unless a test overrides them."""
    for name in (
        "REVIEW_BUNDLER_LOG_LEVEL",
        "REVIEW_BUNDLER_SANITIZE_GROUP_NAMES",
        "REVIEW_BUNDLER_GROUP_KEYS",
        "REVIEW_BUNDLER_OUTPUT_SUFFIX",
        "REVIEW_BUNDLER_OUTPUT_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


def _flag_entry_encrypted(data: bytes, name: str) -> bytes:
    buffer = bytearray(data)
    encoded = name.encode()
    offset = buffer.find(b"PK\x01\x02")
    while offset != -1:
        name_length = int.from_bytes(buffer[offset + 28 : offset + 30], "little")
        if bytes(buffer[offset + 46 : offset + 46 + name_length]) == encoded:
            # General purpose flag bit 0 marks the entry as encrypted.
            buffer[offset + 8] |= 0x01
            return bytes(buffer)
        offset = buffer.find(b"PK\x01\x02", offset + 4)
    raise AssertionError(f"{name} is not in the central directory")


@pytest.fixture
def flag_encrypted() -> Callable[[bytes, str], bytes]:
    """Mark one ZIP entry as encrypted in the central directory."""
    return _flag_entry_encrypted
