"""Bundle routes for the API."""

from __future__ import annotations

import logging
from typing import Annotated, NoReturn

from fastapi import APIRouter, File, Form, HTTPException, Response, UploadFile, status
from starlette.concurrency import run_in_threadpool

from review_bundler.api.schemas.bundles import (
    ArchiveTreeResponse,
    BundlePreviewResponse,
    group_stats_to_schema,
    tree_node_to_schema,
)
from review_bundler.models.errors import ArchiveFormatError, ValidationError
from review_bundler.models.grouping import BundleResult
from review_bundler.models.run import ProcessingRun
from review_bundler.services.archive_reader import detect_archive_kind
from review_bundler.services.archive_writer import build_download_name
from review_bundler.services.bundler import bundle_archive, inspect_archive
from review_bundler.services.config_loader import is_json_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bundles", tags=["bundles"])

ArchiveUpload = Annotated[UploadFile, File(description="ZIP or TAR archive with source files")]
ConfigUpload = Annotated[UploadFile, File(description="JSON array mapping links to groups")]


def _raise_for_error(exc: ValidationError | ArchiveFormatError) -> NoReturn:
    if isinstance(exc, ArchiveFormatError):
        raise HTTPException(
            status_code=422,
            detail=str(exc),
        ) from exc
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(exc),
    ) from exc


def _validate_uploads(archive: UploadFile, config: UploadFile | None = None) -> None:
    try:
        detect_archive_kind(archive.filename, archive.content_type)
    except ValidationError as exc:
        _raise_for_error(exc)
    if config is not None and not is_json_upload(config.filename, config.content_type):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please select a valid JSON file",
        )


async def _run_bundle(
    archive: UploadFile, config: UploadFile, batch_id: str | None
) -> BundleResult:
    _validate_uploads(archive, config)
    archive_data = await archive.read()
    config_data = await config.read()
    run = ProcessingRun()
    try:
        return await run_in_threadpool(
            bundle_archive,
            archive_data,
            archive.filename,
            config_data,
            batch_id,
            archive.content_type,
            run,
        )
    except (ValidationError, ArchiveFormatError) as exc:
        logger.info("Rejected bundle request for %s: %s", archive.filename, exc)
        _raise_for_error(exc)


@router.post(
    "",
    response_class=Response,
    responses={200: {"content": {"application/zip": {}}}},
)
async def create_bundle(
    archive: ArchiveUpload,
    config: ConfigUpload,
    batch_id: Annotated[str, Form(description="Batch identifier used in the download name")],
) -> Response:
    try:
        download_name = build_download_name(batch_id)
    except ValidationError as exc:
        _raise_for_error(exc)

    result = await _run_bundle(archive, config, batch_id)
    filename = result.download_name or download_name
    return Response(
        content=result.archive_bytes,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Bundle-Files": str(result.file_count),
            "X-Bundle-Groups": str(len(result.stats)),
        },
    )


@router.post("/preview", response_model=BundlePreviewResponse)
async def preview_bundle(archive: ArchiveUpload, config: ConfigUpload) -> BundlePreviewResponse:
    result = await _run_bundle(archive, config, None)
    return BundlePreviewResponse(
        file_count=result.file_count,
        groups=[group_stats_to_schema(stats) for stats in result.stats],
        log=result.log,
    )


@router.post("/tree", response_model=ArchiveTreeResponse)
async def archive_tree(archive: ArchiveUpload) -> ArchiveTreeResponse:
    _validate_uploads(archive)
    archive_data = await archive.read()
    try:
        inspection = await run_in_threadpool(
            inspect_archive, archive_data, archive.filename, archive.content_type
        )
    except (ValidationError, ArchiveFormatError) as exc:
        _raise_for_error(exc)

    return ArchiveTreeResponse(
        filename=inspection.filename,
        size_bytes=inspection.size_bytes,
        file_count=inspection.file_count,
        tree=[tree_node_to_schema(node) for node in inspection.tree],
    )
