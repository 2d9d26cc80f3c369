from __future__ import annotations

import pytest

from review_bundler.utils.paths import (
    basename,
    normalize_path,
    path_segments,
    sanitize_batch_id,
    sanitize_group_name,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("folder\\sub\\file.txt", "folder/sub/file.txt"),
        ("/leading/slash.txt", "leading/slash.txt"),
        ("///many///slashes//file.txt", "many/slashes/file.txt"),
        ("\\\\server\\share\\doc.md", "server/share/doc.md"),
        ("plain.txt", "plain.txt"),
        ("", ""),
        ("/", ""),
        ("dir/", "dir/"),
    ],
)
def test_normalize_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["a\\\\b//c", "//x/\\y\\", "\\/\\/mixed\\/path", "already/normal", "", "////"],
)
def test_normalize_path_is_idempotent(raw: str) -> None:
    once = normalize_path(raw)
    assert normalize_path(once) == once
    assert "\\" not in once
    assert "//" not in once
    assert not once.startswith("/")


def test_path_segments_splits_normalized_path() -> None:
    assert path_segments("\\a\\b//c.txt") == ["a", "b", "c.txt"]
    assert path_segments("") == []


def test_basename_returns_last_segment() -> None:
    assert basename("folder\\update_file.txt") == "update_file.txt"
    assert basename("file.txt") == "file.txt"
    assert basename("folder/") == ""


def test_sanitize_group_name_replaces_unsafe_characters() -> None:
    assert sanitize_group_name("Group A/1: (final)") == "Group_A_1___final_"
    assert sanitize_group_name("safe-name_01") == "safe-name_01"


def test_sanitize_batch_id_strips_whitespace() -> None:
    assert sanitize_batch_id("  batch 42 ") == "batch_42"
