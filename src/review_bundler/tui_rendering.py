from __future__ import annotations

from collections.abc import Iterable, Sequence

from review_bundler.models.archive import ArchiveInspection, FileNode, TreeNode
from review_bundler.models.grouping import GroupStats


def render_tree_lines(nodes: Iterable[TreeNode], depth: int = 0) -> list[str]:
    """Render a forest as an indented markdown list."""
    lines: list[str] = []
    indent = "  " * depth
    for node in nodes:
        if isinstance(node, FileNode):
            suffix = " _(empty)_" if node.is_empty else ""
            lines.append(f"{indent}- `{node.name}` ({node.size_bytes:,} bytes){suffix}")
            continue
        stats = node.stats
        lines.append(
            f"{indent}- **{node.name}/** — {stats.total_count} files "
            f"({stats.non_empty_count} non-empty, {stats.empty_count} empty)"
        )
        lines.extend(render_tree_lines(node.children, depth + 1))
    return lines


def render_inspection_markdown(inspection: ArchiveInspection) -> str:
    parts: list[str] = [f"# {inspection.filename or 'Archive'}", ""]
    parts.append(f"- Size: {inspection.size_bytes:,} bytes")
    parts.append(f"- Files: {inspection.file_count}")
    parts.append("")
    parts.append("## Contents")
    tree_lines = render_tree_lines(inspection.tree)
    if tree_lines:
        parts.extend(tree_lines)
    else:
        parts.append("(Archive is empty)")
    return "\n".join(parts)


def render_stats_table(stats: Sequence[GroupStats]) -> str:
    """Render a simple ASCII table summary of per-group statistics."""
    headers = ["Group", "Files", "Insert", "Update"]
    rows = [
        [s.name, str(s.file_count), str(s.insert_count), str(s.update_count)] for s in stats
    ]

    col_widths = [len(h) for h in headers]
    for r in rows:
        for i, cell in enumerate(r):
            col_widths[i] = max(col_widths[i], len(cell))

    def fmt_row(row: list[str]) -> str:
        return " | ".join(cell.ljust(col_widths[i]) for i, cell in enumerate(row))

    sep = "-+-".join("-" * w for w in col_widths)
    lines = [fmt_row(headers), sep]
    for r in rows:
        lines.append(fmt_row(r))

    return "```\n" + "\n".join(lines) + "\n```"


def render_group_details(stats: Sequence[GroupStats]) -> str:
    """Render each group with its files and their operations."""
    parts: list[str] = ["# Groups", ""]
    if not stats:
        parts.append("(No groups processed)")
        return "\n".join(parts)

    for group in stats:
        parts.append(f"## {group.name}")
        if not group.files:
            parts.append("- (No files resolved)")
        for item in group.files:
            parts.append(f"- `{item.name}` — {item.operation}")
        parts.append("")

    return "\n".join(parts)


def render_log(lines: Sequence[str]) -> str:
    if not lines:
        return ""
    return "```\n" + "\n".join(lines) + "\n```"
