"""Attachment lifecycle domain service."""

import re
from datetime import datetime
from pathlib import PurePosixPath
from typing import Iterable, Optional

import logfire

from discuss.config import AttachmentSettings
from discuss.domain.model.attachment import Attachment, normalize_relative_path
from discuss.domain.repository import AttachmentRepository
from discuss.domain.storage import BlobStore
from discuss.domain.value import AttachmentId, CommentId, UploadedFile
from discuss.util.snowflake import SnowflakeGenerator

from .base import Service

DEFAULT_ORIGINAL_NAME = "Attachment"
MAX_ORIGINAL_NAME_LENGTH = 255
SAFE_EXTENSION_PATTERN = re.compile(r"^[.a-z0-9_-]{0,16}$", re.IGNORECASE)

UPLOAD_FAILED = "This attachment could not be saved. Please try again."
UNSUPPORTED_TYPE = "This file type is not allowed for comments."
INVALID_SIZE = "The file size is invalid. Please try again."


class AttachmentService(Service):
    """Validates, persists and purges comment attachments.

    Files are written to the blob store before validation runs, so a
    rejected batch must always be discarded by the caller.
    """

    def __init__(
        self,
        attachment_repository: AttachmentRepository,
        blob_store: BlobStore,
        attachment_settings: AttachmentSettings,
        id_generator: SnowflakeGenerator,
    ) -> None:
        """Initialize attachment service.

        Args:
            attachment_repository: Attachment repository
            blob_store: Storage for attachment files
            attachment_settings: Upload limits and paths
            id_generator: Identifier source for attachments and file names
        """
        self.attachment_repository = attachment_repository
        self.blob_store = blob_store
        self.settings = attachment_settings
        self.id_generator = id_generator

    def validate_uploads(
        self, files: list[UploadedFile]
    ) -> tuple[list[UploadedFile], list[str]]:
        """Validate a batch of uploaded files.

        Every file is checked and every problem reported. A batch with any
        error must be rejected as a whole.

        Args:
            files: Files already written to the blob store

        Returns:
            Tuple of (files that passed, error messages)
        """
        errors: list[str] = []
        accepted: list[UploadedFile] = []

        if len(files) > self.settings.max_files:
            errors.append(
                f"You can attach at most {self.settings.max_files} files per comment."
            )

        allowed = set(self.settings.allowed_mime_types)
        for file in files:
            file_errors = []
            if not file.stored_name:
                file_errors.append(UPLOAD_FAILED)
            if file.mime_type not in allowed:
                file_errors.append(UNSUPPORTED_TYPE)
            if file.size > self.settings.max_size_bytes:
                file_errors.append(
                    f"Each file must be smaller than {self.settings.max_size_mb} MB."
                )
            elif file.size < 0:
                file_errors.append(INVALID_SIZE)

            if file_errors:
                errors.extend(file_errors)
            else:
                accepted.append(file)

        # Identical messages for several files are reported once
        errors = list(dict.fromkeys(errors))
        if errors:
            logfire.info(
                "Attachment batch rejected", file_count=len(files), errors=errors
            )
        return accepted, errors

    async def store_upload(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        data: bytes,
    ) -> UploadedFile:
        """Write an incoming upload under a fresh collision-resistant name.

        Args:
            filename: Client-supplied file name
            content_type: Client-supplied mime type
            data: File content

        Returns:
            The stored file, still unvalidated
        """
        stored_name = self.build_stored_name(filename)
        with logfire.span(
            "attachment_service.store_upload",
            stored_name=stored_name,
            size=len(data),
        ):
            await self.blob_store.write(stored_name, data)
            return UploadedFile(
                stored_name=stored_name,
                mime_type=(content_type or "").strip().lower(),
                size=len(data),
                original_name=filename,
            )

    async def discard_uploads(self, files: Iterable[UploadedFile]) -> None:
        """Remove files written for a rejected submission.

        Missing files are ignored; other failures are logged and skipped.
        """
        with logfire.span("attachment_service.discard_uploads"):
            for file in files:
                if file.stored_name:
                    await self._delete_file(file.stored_name)

    async def attach(
        self, comment_id: CommentId, files: list[UploadedFile]
    ) -> list[Attachment]:
        """Persist attachment rows for validated files.

        Args:
            comment_id: Owning comment
            files: Files accepted by ``validate_uploads``

        Returns:
            Saved attachments
        """
        if not files:
            return []

        with logfire.span(
            "attachment_service.attach",
            comment_id=str(comment_id),
            file_count=len(files),
        ):
            now = datetime.now()
            attachments = [
                Attachment(
                    public_id=AttachmentId(self.id_generator.generate()),
                    comment_id=comment_id,
                    relative_path=normalize_relative_path(
                        f"{self.settings.relative_dir}/{file.stored_name}"
                    ),
                    mime_type=file.mime_type,
                    size_bytes=file.size,
                    original_name=sanitize_original_name(file.original_name),
                    created_at=now,
                )
                for file in files
            ]
            saved = await self.attachment_repository.save_all(attachments)
            logfire.info(
                "Attachments saved", comment_id=str(comment_id), count=len(saved)
            )
            return saved

    async def purge(self, comment_ids: Iterable[CommentId]) -> int:
        """Delete the files and rows of every attachment owned by the comments.

        Only call this once the owning comment rows are confirmed deleted.
        File failures never block the remaining deletions or the row deletion.

        Args:
            comment_ids: Deleted comments

        Returns:
            Number of attachment rows removed
        """
        ids = list(comment_ids)
        if not ids:
            return 0

        with logfire.span("attachment_service.purge", comment_count=len(ids)):
            attachments = await self.attachment_repository.find_by_comments(ids)
            for attachment in attachments:
                if attachment.stored_name:
                    await self._delete_file(attachment.stored_name)

            removed = await self.attachment_repository.delete_by_comments(ids)
            logfire.info(
                "Attachments purged",
                comment_count=len(ids),
                file_count=len(attachments),
                rows_removed=removed,
            )
            return removed

    def build_stored_name(self, filename: Optional[str]) -> str:
        """Build ``<epoch-ms>-<snowflake><ext>``, keeping only safe extensions."""
        suffix = PurePosixPath((filename or "").replace("\\", "/")).suffix.lower()
        if not SAFE_EXTENSION_PATTERN.match(suffix):
            suffix = ""
        return f"{self.id_generator.now_ms()}-{self.id_generator.generate()}{suffix}"

    async def _delete_file(self, name: str) -> None:
        try:
            await self.blob_store.delete(name)
        except FileNotFoundError:
            pass
        except OSError as e:
            logfire.warn("Could not delete attachment file", name=name, error=str(e))


def sanitize_original_name(name: Optional[str]) -> str:
    """Strip NUL bytes and cap the display name length."""
    if not isinstance(name, str):
        return DEFAULT_ORIGINAL_NAME
    cleaned = name.replace("\0", "")[:MAX_ORIGINAL_NAME_LENGTH]
    return cleaned or DEFAULT_ORIGINAL_NAME
