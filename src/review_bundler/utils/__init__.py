"""Utility functions and helpers"""

from review_bundler.utils.display import (
    display_bundle_result,
    display_inspection,
    print_tree,
    prompt_for_archive_file,
    prompt_for_batch_id,
    prompt_for_config_file,
)
from review_bundler.utils.paths import (
    basename,
    normalize_path,
    path_segments,
    sanitize_batch_id,
    sanitize_group_name,
)

__all__ = [
    "basename",
    "display_bundle_result",
    "display_inspection",
    "normalize_path",
    "path_segments",
    "print_tree",
    "prompt_for_archive_file",
    "prompt_for_batch_id",
    "prompt_for_config_file",
    "sanitize_batch_id",
    "sanitize_group_name",
]
