"""Pydantic schemas for bundle API responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from review_bundler.models.archive import FileNode, TreeNode
from review_bundler.models.grouping import GroupStats, Operation


class GroupFileSchema(BaseModel):
    """A resolved file inside a group."""

    name: str
    operation: Operation


class GroupStatsSchema(BaseModel):
    """Per-group statistics."""

    name: str
    file_count: int
    insert_count: int
    update_count: int
    files: list[GroupFileSchema]


class BundlePreviewResponse(BaseModel):
    """Response schema for a bundling run without the archive blob."""

    file_count: int = Field(description="Number of resolved files across all groups")
    groups: list[GroupStatsSchema]
    log: list[str] = Field(description="Timestamped processing log lines")


class FolderStatsSchema(BaseModel):
    empty_count: int
    non_empty_count: int
    total_count: int


class TreeNodeSchema(BaseModel):
    """A file or folder of the archive tree."""

    type: str = Field(description="Either 'file' or 'folder'")
    name: str
    path: str
    size_bytes: int | None = None
    stats: FolderStatsSchema | None = None
    children: list[TreeNodeSchema] = Field(default_factory=list)


class ArchiveTreeResponse(BaseModel):
    """Response schema for the archive tree endpoint."""

    filename: str
    size_bytes: int
    file_count: int
    tree: list[TreeNodeSchema]


TreeNodeSchema.model_rebuild()


def tree_node_to_schema(node: TreeNode) -> TreeNodeSchema:
    if isinstance(node, FileNode):
        return TreeNodeSchema(
            type="file", name=node.name, path=node.path, size_bytes=node.size_bytes
        )
    return TreeNodeSchema(
        type="folder",
        name=node.name,
        path=node.path,
        stats=FolderStatsSchema(
            empty_count=node.stats.empty_count,
            non_empty_count=node.stats.non_empty_count,
            total_count=node.stats.total_count,
        ),
        children=[tree_node_to_schema(child) for child in node.children],
    )


def group_stats_to_schema(stats: GroupStats) -> GroupStatsSchema:
    return GroupStatsSchema(
        name=stats.name,
        file_count=stats.file_count,
        insert_count=stats.insert_count,
        update_count=stats.update_count,
        files=[GroupFileSchema(name=f.name, operation=f.operation) for f in stats.files],
    )
