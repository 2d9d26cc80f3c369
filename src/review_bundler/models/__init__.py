"""Data models and type definitions"""

from review_bundler.models.archive import (
    ArchiveEntry,
    ArchiveInspection,
    DirectoryNode,
    FileNode,
    FolderStats,
    TreeNode,
)
from review_bundler.models.errors import (
    ArchiveFormatError,
    BundleError,
    RunInProgressError,
    ValidationError,
)
from review_bundler.models.grouping import (
    BundleResult,
    GroupConfig,
    GroupFile,
    GroupStats,
    Operation,
    ResolvedFile,
)
from review_bundler.models.run import ProcessingRun, RunEvent, RunStatus

__all__ = [
    "ArchiveEntry",
    "ArchiveFormatError",
    "ArchiveInspection",
    "BundleError",
    "BundleResult",
    "DirectoryNode",
    "FileNode",
    "FolderStats",
    "GroupConfig",
    "GroupFile",
    "GroupStats",
    "Operation",
    "ProcessingRun",
    "ResolvedFile",
    "RunEvent",
    "RunInProgressError",
    "RunStatus",
    "TreeNode",
    "ValidationError",
]
