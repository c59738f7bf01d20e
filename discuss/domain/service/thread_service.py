"""Thread assembly domain service."""

from collections import defaultdict
from typing import Optional

import logfire

from discuss.domain.model import Attachment, Comment, Thread, ThreadNode
from discuss.domain.repository import AttachmentRepository, CommentRepository
from discuss.domain.value import CommentId, PageId

from .base import Service


class ThreadService(Service):
    """Builds the nested, paginated view of a page's approved comments."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        attachment_repository: AttachmentRepository,
    ) -> None:
        """Initialize thread service.

        Args:
            comment_repository: Comment repository
            attachment_repository: Attachment repository
        """
        self.comment_repository = comment_repository
        self.attachment_repository = attachment_repository

    async def fetch_thread(
        self,
        page_id: PageId,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Thread:
        """Assemble one window of root threads for a page.

        Algorithm:
        1. Fetch approved root ids for the page, oldest first
        2. Slice the window ``[offset, offset + limit)``
        3. Fetch the approved closure seeded at the window's roots
        4. Validate every stored parent pointer (dangling and cyclic pointers
           are dropped)
        5. Build the adjacency map from the validated pointers
        6. Collect the nodes reachable from each selected root
        7. Batch-fetch attachments for the collected nodes
        8. Link nodes and assign depth top-down

        Args:
            page_id: Page ID
            limit: Maximum number of root threads (None or non-positive = all)
            offset: Number of root threads to skip (negative = 0)

        Returns:
            Thread with roots in window order and children in creation order.
            Unknown pages yield an empty thread.
        """
        with logfire.span(
            "thread_service.fetch_thread",
            page_id=str(page_id),
            limit=limit,
            offset=offset,
        ):
            root_ids = await self.comment_repository.find_root_ids(page_id)
            window = _slice_window(root_ids, limit, offset)
            if not window:
                logfire.info(
                    "Empty thread window",
                    page_id=str(page_id),
                    total_root_count=len(root_ids),
                )
                return Thread(roots=[], total_root_count=len(root_ids))

            rows = await self.comment_repository.find_thread_rows(page_id, window)
            rows_by_id: dict[CommentId, Comment] = {
                row.public_id: row for row in rows
            }

            parents = self._validate_parents(page_id, rows_by_id)

            # Rows arrive in creation order, so children lists are too
            children: dict[CommentId, list[CommentId]] = defaultdict(list)
            for row in rows:
                parent_id = parents.get(row.public_id)
                if parent_id is not None:
                    children[parent_id].append(row.public_id)

            included = _collect_reachable(window, rows_by_id, children)

            attachments_by_comment: dict[CommentId, list[Attachment]] = defaultdict(
                list
            )
            if included:
                attachments = await self.attachment_repository.find_by_comments(
                    list(included)
                )
                for attachment in attachments:
                    attachments_by_comment[attachment.comment_id].append(attachment)

            nodes: dict[CommentId, ThreadNode] = {
                row.public_id: ThreadNode(
                    comment=row,
                    parent_id=parents.get(row.public_id),
                    attachments=attachments_by_comment.get(row.public_id, []),
                )
                for row in rows
                if row.public_id in included
            }
            for node in nodes.values():
                if node.parent_id is not None and node.parent_id in nodes:
                    nodes[node.parent_id].children.append(node)

            roots = [nodes[root_id] for root_id in window if root_id in nodes]
            for root in roots:
                _assign_depth(root, 0)

            logfire.info(
                "Thread assembled",
                page_id=str(page_id),
                root_count=len(roots),
                comment_count=len(nodes),
                total_root_count=len(root_ids),
            )
            return Thread(roots=roots, total_root_count=len(root_ids))

    def _validate_parents(
        self, page_id: PageId, rows_by_id: dict[CommentId, Comment]
    ) -> dict[CommentId, CommentId | None]:
        """Map each row to its validated parent.

        A pointer survives only when walking up from it reaches a root
        without leaving the fetched rows or revisiting a node.
        """
        parents: dict[CommentId, CommentId | None] = {}
        for comment_id, row in rows_by_id.items():
            parent_id = row.parent_id
            if parent_id is None or parent_id not in rows_by_id:
                parents[comment_id] = None
                continue

            visited: set[CommentId] = set()
            current: CommentId | None = parent_id
            valid = True
            while current is not None:
                if current == comment_id or current in visited:
                    logfire.warn(
                        "Cyclic parent pointer dropped",
                        page_id=str(page_id),
                        comment_id=str(comment_id),
                        parent_id=str(parent_id),
                    )
                    valid = False
                    break
                visited.add(current)
                ancestor = rows_by_id.get(current)
                if ancestor is None:
                    logfire.warn(
                        "Dangling parent pointer dropped",
                        page_id=str(page_id),
                        comment_id=str(comment_id),
                        missing_id=str(current),
                    )
                    valid = False
                    break
                current = ancestor.parent_id

            parents[comment_id] = parent_id if valid else None
        return parents


def _slice_window(
    root_ids: list[CommentId], limit: Optional[int], offset: Optional[int]
) -> list[CommentId]:
    start = offset if offset and offset > 0 else 0
    if limit is None or limit <= 0:
        return root_ids[start:]
    return root_ids[start : start + limit]


def _collect_reachable(
    window: list[CommentId],
    rows_by_id: dict[CommentId, Comment],
    children: dict[CommentId, list[CommentId]],
) -> set[CommentId]:
    included: set[CommentId] = set()
    for root_id in window:
        if root_id not in rows_by_id:
            continue
        stack = [root_id]
        while stack:
            current = stack.pop()
            if current in included:
                continue
            included.add(current)
            stack.extend(children.get(current, []))
    return included


def _assign_depth(root: ThreadNode, depth: int) -> None:
    stack = [(root, depth)]
    while stack:
        node, level = stack.pop()
        node.depth = level
        stack.extend((child, level + 1) for child in node.children)
