from __future__ import annotations

import pytest

from review_bundler.models.archive import ArchiveEntry
from review_bundler.services.resolver import resolve_entry, tail_matches
from review_bundler.utils.paths import path_segments


def _entries(*paths: str) -> list[ArchiveEntry]:
    return [
        ArchiveEntry(
            path=path.rstrip("/"),
            is_directory=path.endswith("/"),
            size_bytes=0,
            raw_name=path,
            index=index,
        )
        for index, path in enumerate(paths)
    ]


class TestResolveEntry:
    def test_exact_match_wins(self) -> None:
        entries = _entries("x/a/b.txt", "a/b.txt")
        match = resolve_entry(entries, "a/b.txt")
        assert match is not None
        assert match.path == "a/b.txt"

    def test_suffix_match_tolerates_extra_archive_directories(self) -> None:
        entries = _entries("a/b/c.txt")
        match = resolve_entry(entries, "b/c.txt")
        assert match is not None
        assert match.path == "a/b/c.txt"

    def test_suffix_match_tolerates_extra_config_directories(self) -> None:
        entries = _entries("b/c.txt")
        match = resolve_entry(entries, "MainTestFolder/b/c.txt")
        assert match is not None
        assert match.path == "b/c.txt"

    def test_search_path_is_normalized(self) -> None:
        entries = _entries("folder/sub/file.txt")
        match = resolve_entry(entries, "\\sub\\\\file.txt")
        assert match is not None
        assert match.path == "folder/sub/file.txt"

    def test_first_listed_entry_wins_on_ambiguity(self) -> None:
        entries = _entries("one/shared/name.txt", "two/shared/name.txt")
        match = resolve_entry(entries, "shared/name.txt")
        assert match is not None
        assert match.path == "one/shared/name.txt"

    def test_segments_must_match_whole_names(self) -> None:
        entries = _entries("folder/notes.txt")
        assert resolve_entry(entries, "otes.txt") is None

    def test_mismatched_parent_segment_is_not_found(self) -> None:
        entries = _entries("a/b/c.txt")
        assert resolve_entry(entries, "x/c.txt") is None

    def test_directories_never_match(self) -> None:
        entries = _entries("docs/", "docs/readme.md")
        assert resolve_entry(entries, "docs") is None

    def test_empty_search_path_is_not_found(self) -> None:
        assert resolve_entry(_entries("a.txt"), "") is None
        assert resolve_entry(_entries("a.txt"), "///") is None


@pytest.mark.parametrize(
    ("entry_path", "search_path"),
    [
        ("a/b/c.txt", "b/c.txt"),
        ("a/b/c.txt", "c.txt"),
        ("deep/er/still/x.bin", "still/x.bin"),
        ("q.txt", "q.txt"),
    ],
)
def test_matches_share_trailing_segments(entry_path: str, search_path: str) -> None:
    match = resolve_entry(_entries("unrelated/file.txt", entry_path), search_path)
    assert match is not None
    match_segments = path_segments(match.path)
    search_segments = path_segments(search_path)
    depth = min(len(match_segments), len(search_segments))
    assert match_segments[-depth:] == search_segments[-depth:]


def test_tail_matches() -> None:
    assert tail_matches("a/b/c.txt", "b/c.txt")
    assert tail_matches("b/c.txt", "a/b/c.txt")
    assert not tail_matches("a/b/c.txt", "a/c.txt")
    assert not tail_matches("", "c.txt")
