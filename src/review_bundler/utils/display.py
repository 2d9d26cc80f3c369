"""Display and formatting utilities"""

from __future__ import annotations

from pathlib import Path

from review_bundler.models.archive import ArchiveInspection, FileNode, TreeNode
from review_bundler.models.grouping import BundleResult


def prompt_for_archive_file() -> Path | None:
    """Display file picker dialog for archive selection.

    Returns:
        Path to selected archive, or None if cancelled.
    """
    import easygui as eg

    archive_path_str = eg.fileopenbox(
        msg="Select a ZIP or TAR archive containing the review files",
        title="Select Source Archive",
        default="*.zip",
        filetypes=["*.zip", "*.tar", "*.tar.gz", "*.tgz"],
    )
    return Path(archive_path_str) if archive_path_str else None


def prompt_for_config_file() -> Path | None:
    """Display file picker dialog for the JSON group configuration."""
    import easygui as eg

    config_path_str = eg.fileopenbox(
        msg="Select the JSON file mapping links to review groups",
        title="Select Group Configuration",
        default="*.json",
        filetypes=["*.json"],
    )
    return Path(config_path_str) if config_path_str else None


def prompt_for_batch_id() -> str | None:
    """Ask for the batch identifier used in the download name."""
    import easygui as eg

    value = eg.enterbox(msg="Enter the batch identifier", title="Batch Identifier")
    if value is None or not value.strip():
        return None
    return value.strip()


def print_tree(node: TreeNode, indent: int = 0) -> None:
    """Recursively print the directory tree structure.

    Args:
        node: Tree node to print (directory or file).
        indent: Current indentation level.
    """
    prefix = "  " * indent
    if isinstance(node, FileNode):
        marker = " (empty)" if node.is_empty else ""
        print(f"{prefix}📄 {node.name} [{node.size_bytes:,} bytes]{marker}")
        return

    stats = node.stats
    print(
        f"{prefix}📁 {node.name}/ "
        f"({stats.total_count} files, {stats.non_empty_count} non-empty, "
        f"{stats.empty_count} empty)"
    )
    for child in node.children:
        print_tree(child, indent + 1)


def display_inspection(inspection: ArchiveInspection) -> None:
    """Display archive metadata and its directory tree."""
    print("\n✅ Loaded archive:")
    print(f"   • Filename: {inspection.filename}")
    print(f"   • Size: {inspection.size_bytes:,} bytes")
    print(f"   • Files found: {inspection.file_count}")

    print("\n📂 Directory Structure:")
    print("-" * 60)
    for node in inspection.tree:
        print_tree(node)


def display_bundle_result(result: BundleResult, output_path: Path | None = None) -> None:
    """Display per-group statistics and the processing log.

    Args:
        result: Result of the bundling run.
        output_path: Where the bundle was written, if it was saved.
    """
    print("\n📁 Groups:")
    print("-" * 60)
    print(f"{'Group':<32} {'Files':<7} {'Insert':<7} {'Update':<7}")
    print("-" * 60)
    for stats in result.stats:
        print(
            f"{stats.name:<32} {stats.file_count:<7} {stats.insert_count:<7} "
            f"{stats.update_count:<7}"
        )

    print("\n📝 Processing Log:")
    print("-" * 60)
    for line in result.log:
        print(f"   {line}")

    print("\n" + "=" * 60)
    if output_path is not None:
        print(f"✨ Bundle written to {output_path}")
    else:
        print(f"✨ Bundled {result.file_count} files")
    print("=" * 60)
