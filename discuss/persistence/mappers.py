"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict

from discuss.domain.model import Attachment, Comment
from discuss.domain.model.attachment import normalize_relative_path
from discuss.domain.value import AttachmentId, CommentId, CommentStatus, PageId


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    parent_id = (row.get("parent_id") or "").strip()
    return Comment(
        public_id=CommentId(row["public_id"]),
        internal_id=row["id"],
        page_id=PageId(row["page_id"]),
        author=row.get("author"),
        body=row["body"],
        parent_id=CommentId(parent_id) if parent_id else None,
        status=CommentStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
        submitter_address=row.get("submitter_address"),
        possession_token=row.get("possession_token"),
        is_privileged_author=bool(row.get("is_privileged_author")),
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict.

    The internal id is owned by the database and never written.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for database insertion/update
    """
    data = comment.model_dump(exclude={"internal_id"})
    data["status"] = comment.status.value
    return data


def row_to_attachment(row: Dict[str, Any]) -> Attachment:
    """Convert database row to Attachment domain model.

    Args:
        row: Database row as dict

    Returns:
        Attachment domain model
    """
    size = row.get("size_bytes")
    return Attachment(
        public_id=AttachmentId(row["public_id"]),
        comment_id=CommentId(row["comment_id"]),
        relative_path=normalize_relative_path(row.get("relative_path")),
        mime_type=row.get("mime_type") or "",
        size_bytes=size if isinstance(size, int) and size >= 0 else 0,
        original_name=row.get("original_name") or "Attachment",
        created_at=row["created_at"],
    )


def attachment_to_dict(attachment: Attachment) -> Dict[str, Any]:
    """Convert Attachment domain model to database dict."""
    return attachment.model_dump()
