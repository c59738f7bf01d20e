"""Response models shared by the comment use cases."""

from datetime import datetime

from pydantic import BaseModel

from discuss.domain.model import Attachment, Comment, ThreadNode


class AttachmentResponse(BaseModel):
    """Attachment as shown to clients."""

    attachment_id: str
    url: str | None
    mime_type: str
    size_bytes: int
    original_name: str
    is_image: bool

    @classmethod
    def from_domain(cls, attachment: Attachment, public_prefix: str) -> "AttachmentResponse":
        return cls(
            attachment_id=str(attachment.public_id),
            url=attachment.public_url(public_prefix),
            mime_type=attachment.mime_type,
            size_bytes=attachment.size_bytes,
            original_name=attachment.original_name,
            is_image=attachment.is_image,
        )


class CommentResponse(BaseModel):
    """Comment as shown to clients.

    Internal ids, submitter addresses and possession tokens never leave the
    application layer.
    """

    comment_id: str
    page_id: str
    author: str | None
    body: str
    parent_id: str | None
    status: str
    created_at: datetime
    updated_at: datetime | None
    is_privileged_author: bool
    attachments: list[AttachmentResponse] = []

    @classmethod
    def from_domain(
        cls,
        comment: Comment,
        attachments: list[Attachment] | None = None,
        public_prefix: str = "/public/",
    ) -> "CommentResponse":
        return cls(
            comment_id=str(comment.public_id),
            page_id=str(comment.page_id),
            author=comment.author,
            body=comment.body,
            parent_id=str(comment.parent_id) if comment.parent_id else None,
            status=comment.status.value,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            is_privileged_author=comment.is_privileged_author,
            attachments=[
                AttachmentResponse.from_domain(a, public_prefix)
                for a in attachments or []
            ],
        )


class ThreadNodeResponse(BaseModel):
    """Thread node for API response.

    Recursive structure mirroring the domain thread. ``parent_id`` is the
    validated parent used for rendering.
    """

    comment_id: str
    author: str | None
    body: str
    parent_id: str | None
    depth: int
    created_at: datetime
    updated_at: datetime | None
    is_privileged_author: bool
    owned: bool
    attachments: list[AttachmentResponse]
    children: list["ThreadNodeResponse"]

    @classmethod
    def from_domain(
        cls, node: ThreadNode, owned_ids: set[str], public_prefix: str
    ) -> "ThreadNodeResponse":
        """Convert a domain thread node to response model.

        Args:
            node: Domain thread node
            owned_ids: Comments the caller holds possession tokens for
            public_prefix: Mount point for attachment URLs

        Returns:
            API response model with children recursively converted
        """
        comment = node.comment
        return cls(
            comment_id=str(comment.public_id),
            author=comment.author,
            body=comment.body,
            parent_id=str(node.parent_id) if node.parent_id else None,
            depth=node.depth,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            is_privileged_author=comment.is_privileged_author,
            owned=comment.public_id in owned_ids,
            attachments=[
                AttachmentResponse.from_domain(a, public_prefix)
                for a in node.attachments
            ],
            children=[
                cls.from_domain(child, owned_ids, public_prefix)
                for child in node.children
            ],
        )
