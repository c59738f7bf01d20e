"""Domain model entities for discussion threads."""

from discuss.domain.model.attachment import Attachment
from discuss.domain.model.comment import Comment
from discuss.domain.model.thread import Thread, ThreadNode

__all__ = [
    "Attachment",
    "Comment",
    "Thread",
    "ThreadNode",
]
