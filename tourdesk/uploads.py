"""
Local disk storage for uploaded files.

Files land in ``UPLOAD_DIR/<entity>/<reference_id>/`` and are referenced in the
database by their path relative to ``UPLOAD_DIR``.
"""

import logging
import secrets
import shutil
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from .config import MAX_UPLOAD_FILES, MAX_UPLOAD_SIZE_MB, UPLOAD_DIR
from .errors import NotFoundError, ValidationFailedError
from .models import utcnow

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = MAX_UPLOAD_SIZE_MB * 1024 * 1024

DANGEROUS_FILENAME_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]

MEMBER_DOCUMENTS = "member"
PACKAGE_COVERS = "tourpackage"


def _validate_filename(filename: str) -> None:
    for char in DANGEROUS_FILENAME_CHARS:
        if char in filename:
            logger.warning(f"❌ Dangerous character '{char}' detected in filename: '{filename}'")
            raise ValidationFailedError(f"Invalid filename - contains dangerous character '{char}'")

    if len(filename) > 255:
        raise ValidationFailedError("Filename too long - maximum 255 characters")


def _stored_name(field_name: str, original_name: str) -> str:
    """``<field>-<millis>-<random><ext>``, never derived from user-controlled path parts"""
    suffix = Path(original_name).suffix.lower()
    if not suffix[1:].isalnum():
        suffix = ""
    return f"{field_name}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"


def present_files(files: Optional[list[UploadFile]]) -> list[UploadFile]:
    """Drop the empty parts browsers send for untouched file inputs"""
    return [f for f in files or [] if f is not None and f.filename]


async def save_uploads(
    files: list[UploadFile],
    entity: str,
    reference_id: str,
    field_name: str,
) -> list[dict]:
    """
    Write uploaded files to disk.

    If any file fails validation every file already written by this call is
    removed before the error propagates.

    Returns:
        Metadata dicts: filename, originalName, path, mimetype, size, uploadedAt
    """
    if not files:
        return []

    if len(files) > MAX_UPLOAD_FILES:
        raise ValidationFailedError(f"Too many files - maximum {MAX_UPLOAD_FILES} per request")

    target_dir = UPLOAD_DIR / entity / reference_id
    target_dir.mkdir(parents=True, exist_ok=True)

    stored: list[dict] = []
    try:
        for upload in files:
            original_name = upload.filename or ""
            _validate_filename(original_name)

            contents = await upload.read()
            if len(contents) > MAX_FILE_SIZE:
                raise ValidationFailedError(
                    f"File size exceeds {MAX_UPLOAD_SIZE_MB}MB limit. "
                    f"Your file is {len(contents) / (1024 * 1024):.2f}MB."
                )

            filename = _stored_name(field_name, original_name)
            destination = target_dir / filename
            destination.write_bytes(contents)

            stored.append(
                {
                    "filename": filename,
                    "originalName": original_name,
                    "path": destination.relative_to(UPLOAD_DIR).as_posix(),
                    "mimetype": upload.content_type or "application/octet-stream",
                    "size": len(contents),
                    "uploadedAt": utcnow().isoformat(),
                }
            )
            logger.info(f"📤 Stored upload {original_name} as {destination}")
    except Exception:
        delete_stored_files([doc["path"] for doc in stored])
        raise

    return stored


def delete_stored_files(paths: list[str]) -> None:
    """Remove stored files; missing files are ignored"""
    for relative_path in paths:
        try:
            (UPLOAD_DIR / relative_path).unlink(missing_ok=True)
            logger.info(f"🧹 Cleaned up file: {relative_path}")
        except OSError as e:
            logger.error(f"❌ Error deleting file {relative_path}: {e}")


def delete_reference_dir(entity: str, reference_id: str) -> None:
    """Remove everything stored for one entity instance"""
    target_dir = UPLOAD_DIR / entity / reference_id
    if target_dir.is_dir():
        shutil.rmtree(target_dir)
        logger.info(f"🧹 Removed upload directory {target_dir}")


def prune_empty_dir(entity: str, reference_id: str) -> None:
    """Remove an entity directory only when nothing is left in it"""
    target_dir = UPLOAD_DIR / entity / reference_id
    if target_dir.is_dir() and not any(target_dir.iterdir()):
        target_dir.rmdir()


def resolve_stored_path(relative_path: str, entity: str = "File") -> Path:
    """
    Absolute path of a stored file, refusing anything outside ``UPLOAD_DIR``.

    Raises:
        NotFoundError: when the file is missing on disk
    """
    file_path = (UPLOAD_DIR / relative_path).resolve()
    if UPLOAD_DIR not in file_path.parents or not file_path.is_file():
        logger.error(f"❌ File not found on filesystem: {file_path}")
        raise NotFoundError(entity, f"{entity} not found on server")
    return file_path
