"""Derived thread read models.

These are never persisted. The thread service builds them per request and
they are thrown away once the response is rendered.
"""

from dataclasses import dataclass, field

from discuss.domain.model.attachment import Attachment
from discuss.domain.model.comment import Comment
from discuss.domain.value import CommentId


@dataclass
class ThreadNode:
    """A comment placed in its rendered thread.

    ``parent_id`` is the validated parent pointer, which can differ from
    ``comment.parent_id`` when the stored pointer was dangling or cyclic.
    """

    comment: Comment
    parent_id: CommentId | None = None
    depth: int = 0
    attachments: list[Attachment] = field(default_factory=list)
    children: list["ThreadNode"] = field(default_factory=list)

    @property
    def public_id(self) -> CommentId:
        return self.comment.public_id

    def walk(self):
        """Yield this node and all of its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class Thread:
    """One window of root threads for a page."""

    roots: list[ThreadNode]
    total_root_count: int

    def comments(self) -> list[Comment]:
        """All comments in the window, in render order."""
        return [node.comment for root in self.roots for node in root.walk()]
