"""Strongly typed identifiers for discussion entities.

Public identifiers are opaque snowflake strings. They are the only ids that
leave the store; internal integer surrogates stay inside persistence.
"""

from typing import NewType

PageId = NewType("PageId", str)
CommentId = NewType("CommentId", str)
AttachmentId = NewType("AttachmentId", str)
