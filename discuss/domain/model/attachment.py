"""Attachment entity."""

import re
from datetime import datetime

from pydantic import Field

from discuss.domain.model.common import DomainModel
from discuss.domain.value import AttachmentId, CommentId

IMAGE_MIME_PATTERN = re.compile(r"^image/\S+$", re.IGNORECASE)


class Attachment(DomainModel):
    """A file owned by a comment.

    Attachments are created together with their comment and only destroyed
    when that comment is deleted.
    """

    public_id: AttachmentId
    comment_id: CommentId
    relative_path: str  # e.g. uploads/comments/1712345678-123.png
    mime_type: str
    size_bytes: int = Field(ge=0)
    original_name: str = "Attachment"
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def stored_name(self) -> str:
        """File name inside the upload directory."""
        return normalize_relative_path(self.relative_path).rsplit("/", 1)[-1]

    @property
    def is_image(self) -> bool:
        """Whether the file can be rendered inline."""
        return bool(IMAGE_MIME_PATTERN.match(self.mime_type or ""))

    def public_url(self, prefix: str) -> str | None:
        """Download URL under the public mount point."""
        path = normalize_relative_path(self.relative_path)
        if not path:
            return None
        return f"{prefix.rstrip('/')}/{path}"


def normalize_relative_path(value: str | None) -> str:
    """Use forward slashes and strip leading separators."""
    if not isinstance(value, str):
        return ""
    return re.sub(r"^/+", "", value.replace("\\", "/"))
