"""
Media upload "service layer".

Validates an image batch, uploads it to the media host and returns one
durable URL per file, in submission order. A batch is all-or-nothing: a bad
extension rejects the whole batch before any upload, and a failed upload
discards the files already sent.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from fastapi import UploadFile

from core import config
from core.errors import UploadError, ValidationError

from .cloudinary import CloudinaryClient, UploadedImage

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png"}
MAX_FILES = 5

logger = logging.getLogger(__name__)


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def present_files(files: list[UploadFile] | None) -> list[UploadFile]:
    """
    Drop empty form parts (browsers send a nameless part for an empty input).
    """
    return [f for f in (files or []) if f is not None and f.filename]


def validate_batch(files: list[UploadFile]) -> None:
    if len(files) > MAX_FILES:
        raise ValidationError(f"Too many images. Max is {MAX_FILES}.")

    rejected = [f.filename for f in files if _file_ext(f.filename or "") not in ALLOWED_EXTENSIONS]
    if rejected:
        allowed = ", ".join(sorted(ext.lstrip(".") for ext in ALLOWED_EXTENSIONS))
        raise ValidationError(f"Unsupported image type: {', '.join(rejected)}. Allowed: {allowed}.")


def storage_keys(filenames: list[str], *, now_ms: int | None = None) -> list[str]:
    """
    Build `<epoch-ms>-<stem>` keys, suffixing repeated stems within the batch.
    """
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    seen: dict[str, int] = {}
    keys: list[str] = []
    for name in filenames:
        stem = Path(name).stem.strip() or "image"
        count = seen.get(stem, 0)
        seen[stem] = count + 1
        keys.append(f"{stamp}-{stem}" if count == 0 else f"{stamp}-{stem}-{count}")
    return keys


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise ValidationError(f"Image {file.filename} is too large. Max is {max_bytes} bytes.")

    return bytes(buf)


async def upload_batch(files: list[UploadFile], *, client: CloudinaryClient) -> list[UploadedImage]:
    validate_batch(files)
    max_bytes = config.max_upload_bytes()
    folder = config.media_folder()

    payloads = [await read_upload_bytes(f, max_bytes) for f in files]
    keys = storage_keys([f.filename or "" for f in files])

    uploaded: list[UploadedImage] = []
    for file, data, key in zip(files, payloads, keys):
        try:
            image = await client.upload(
                data,
                filename=file.filename or key,
                public_id=key,
                folder=folder,
                content_type=file.content_type,
            )
        except UploadError:
            logger.warning("upload_failed key=%s already_uploaded=%s", key, len(uploaded))
            await discard(uploaded, client=client)
            raise
        uploaded.append(image)

    logger.info("upload_complete folder=%s count=%s", folder, len(uploaded))
    return uploaded


async def discard(images: list[UploadedImage], *, client: CloudinaryClient) -> None:
    """
    Best-effort removal of uploaded images. Never raises; failures are logged.
    """
    for image in images:
        try:
            await client.destroy(image.public_id)
        except UploadError:
            logger.exception("discard_failed public_id=%s", image.public_id)
