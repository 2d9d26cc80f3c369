"""Build the display tree for an archive listing."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from review_bundler.models.archive import (
    ArchiveEntry,
    DirectoryNode,
    FileNode,
    FolderStats,
    TreeNode,
)
from review_bundler.utils.paths import path_segments


def build_tree(
    entries: Iterable[ArchiveEntry],
    size_of: Callable[[ArchiveEntry], int] | None = None,
) -> list[TreeNode]:
    """Build a forest of directory/file nodes from archive entries.

    Args:
        entries: Archive entries in listing order.
        size_of: Returns the byte length of a file entry. Defaults to the size
            recorded in the archive listing.

    Returns:
        Top-level nodes in first-seen order, with folder stats filled in.
    """
    root = DirectoryNode(name="", path="")
    nodes: dict[str, DirectoryNode] = {"": root}

    def _get_directory(path: str) -> DirectoryNode:
        if path not in nodes:
            parent_path, _, name = path.rpartition("/")
            parent = _get_directory(parent_path)
            node = DirectoryNode(name=name, path=path)
            parent.children.append(node)
            nodes[path] = node
        return nodes[path]

    for entry in entries:
        segments = path_segments(entry.path)
        if not segments:
            continue

        if entry.is_directory:
            _get_directory("/".join(segments))
            continue

        directory = _get_directory("/".join(segments[:-1]))
        size = size_of(entry) if size_of is not None else entry.size_bytes
        directory.children.append(
            FileNode(name=segments[-1], path="/".join(segments), size_bytes=size)
        )

    _compute_stats(root)
    return root.children


def _compute_stats(directory: DirectoryNode) -> FolderStats:
    stats = FolderStats()
    for child in directory.children:
        if isinstance(child, FileNode):
            if child.is_empty:
                stats.empty_count += 1
            else:
                stats.non_empty_count += 1
            continue
        child_stats = _compute_stats(child)
        stats.empty_count += child_stats.empty_count
        stats.non_empty_count += child_stats.non_empty_count
    stats.total_count = stats.empty_count + stats.non_empty_count
    directory.stats = stats
    return stats


def iter_files(nodes: Iterable[TreeNode]) -> Iterator[FileNode]:
    """Yield every file node below *nodes*, depth first."""
    for node in nodes:
        if isinstance(node, FileNode):
            yield node
        else:
            yield from iter_files(node.children)


def count_files(nodes: Iterable[TreeNode]) -> int:
    """Recursively count all files in the forest."""
    return sum(1 for _ in iter_files(nodes))
