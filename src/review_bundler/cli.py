from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from review_bundler.config import configure_logging, get_settings
from review_bundler.models import BundleError, ProcessingRun
from review_bundler.services import build_download_name, bundle_archive, inspect_archive
from review_bundler.services.config_loader import is_json_upload
from review_bundler.utils import (
    display_bundle_result,
    display_inspection,
    prompt_for_archive_file,
    prompt_for_batch_id,
    prompt_for_config_file,
)

logger = logging.getLogger(__name__)


def run_cli(
    archive_path: Path | None = None,
    config_path: Path | None = None,
    batch_id: str | None = None,
) -> int:
    """Run the CLI workflow: archive → config → batch id → grouped bundle.

    Any input not given is asked for with a dialog.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    print("=" * 60)
    print("Review Bundler - Archive Regrouping Tool")
    print("=" * 60)
    print()

    archive_path = archive_path or prompt_for_archive_file()
    if not archive_path:
        print("❌ No archive selected. Exiting.")
        return 1

    config_path = config_path or prompt_for_config_file()
    if not config_path:
        print("❌ No configuration selected. Exiting.")
        return 1
    if not is_json_upload(config_path.name):
        print("❌ Error: Please select a valid JSON file")
        return 1

    batch_id = batch_id or prompt_for_batch_id()
    if not batch_id:
        print("❌ No batch identifier entered. Exiting.")
        return 1

    print(f"\n📦 Processing: {archive_path.name} with {config_path.name}")
    print("-" * 60)

    try:
        archive_data = archive_path.read_bytes()
        config_data = config_path.read_bytes()
    except OSError as exc:
        print(f"\n❌ Error: {exc}")
        return 1

    try:
        inspection = inspect_archive(archive_data, archive_path.name)
    except BundleError as exc:
        print(f"\n❌ Error: {exc}")
        return 1
    display_inspection(inspection)

    run = ProcessingRun()
    try:
        result = bundle_archive(
            archive_data,
            archive_path.name,
            config_data,
            batch_id=batch_id,
            run=run,
        )
    except BundleError as exc:
        print(f"\n❌ Error: {exc}")
        for line in run.log_lines:
            print(f"   {line}")
        return 1

    output_dir = get_settings().output_dir or archive_path.parent
    output_path = output_dir / (result.download_name or build_download_name(batch_id))
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.archive_bytes)

    display_bundle_result(result, output_path)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the CLI application.

    Optional positional arguments: ARCHIVE CONFIG BATCH_ID.
    """
    configure_logging()
    args = list(sys.argv[1:] if argv is None else argv)
    archive_path = Path(args[0]) if len(args) > 0 else None
    config_path = Path(args[1]) if len(args) > 1 else None
    batch_id = args[2] if len(args) > 2 else None
    try:
        return run_cli(archive_path, config_path, batch_id)
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user. Exiting.")
        return 130
    except Exception as exc:
        logger.exception("Unexpected CLI failure")
        print(f"\n❌ Unexpected error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
