"""Multipart upload persistence — saves files to the upload dir as UploadedAssets."""

from __future__ import annotations

import os
import re
import time
import uuid
from pathlib import Path

import structlog
from fastapi import UploadFile

from adforge.config import settings
from adforge.errors import UploadError
from adforge.models.asset import UploadedAsset

logger = structlog.get_logger()

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_CHUNK_SIZE = 1024 * 1024


def _safe_name(file_name: str) -> str:
    base = Path(file_name).name or "upload"
    return _UNSAFE_CHARS.sub("_", base)[:120]


async def save_upload(upload: UploadFile | None, category: str | None = None) -> UploadedAsset:
    """Stream *upload* to disk as ``<epoch-ms>-<rand>-<name>``.

    Raises:
        UploadError: If the file is missing, empty, oversized or unreadable.
    """
    if upload is None or not upload.filename:
        raise UploadError("No file uploaded", stage="upload")

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    dest = upload_dir / f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}-{_safe_name(upload.filename)}"

    size = 0
    try:
        with open(dest, "wb") as fh:
            while chunk := await upload.read(_CHUNK_SIZE):
                size += len(chunk)
                if size > settings.max_upload_bytes:
                    raise UploadError(
                        f"{upload.filename} exceeds the {settings.max_upload_bytes // (1024 * 1024)}MB limit",
                        stage="upload",
                    )
                fh.write(chunk)
    except UploadError:
        discard_files([dest])
        raise
    except OSError as exc:
        discard_files([dest])
        raise UploadError(f"Could not read {upload.filename}: {exc}", stage="upload") from exc

    if size == 0:
        discard_files([dest])
        raise UploadError(f"{upload.filename} is empty", stage="upload")

    logger.info("upload.saved", file_name=upload.filename, size_kb=round(size / 1024, 2))
    return UploadedAsset(
        file_name=upload.filename,
        mime_type=upload.content_type or "application/octet-stream",
        size_bytes=size,
        category_label=category or "general",
        path=str(dest),
    )


async def save_uploads(
    uploads: list[UploadFile],
    categories: list[str],
) -> list[UploadedAsset]:
    """Save every upload; on any failure, the ones already saved are removed."""
    if not uploads:
        raise UploadError("No images uploaded", stage="upload")
    if len(uploads) > settings.max_upload_files:
        raise UploadError(f"At most {settings.max_upload_files} images per request", stage="upload")

    assets: list[UploadedAsset] = []
    try:
        for index, upload in enumerate(uploads):
            category = categories[index] if index < len(categories) else None
            assets.append(await save_upload(upload, category))
    except UploadError:
        discard_files([a.path for a in assets])
        raise
    return assets


def discard_files(paths) -> None:
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
