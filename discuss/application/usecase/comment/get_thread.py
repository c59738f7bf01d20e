"""Get thread use case."""

from pydantic import BaseModel

from discuss.application.usecase.base import BaseUseCase
from discuss.config import AttachmentSettings
from discuss.domain.service import OwnershipService, ThreadService
from discuss.domain.value import PageId

from .response import ThreadNodeResponse


class GetThreadRequest(BaseModel):
    """Get thread request."""

    page_id: str
    limit: int | None = None  # None or non-positive returns every root thread
    offset: int = 0
    session_tokens: dict[str, str] = {}


class GetThreadResponse(BaseModel):
    """Get thread response."""

    roots: list[ThreadNodeResponse]
    total_root_count: int
    session_tokens: dict[str, str] | None = None  # Set when the map changed


class GetThreadUseCase(BaseUseCase):
    """Use case for reading one window of a page's discussion."""

    def __init__(
        self,
        thread_service: ThreadService,
        ownership_service: OwnershipService,
        attachment_settings: AttachmentSettings,
    ) -> None:
        """Initialize get thread use case.

        Args:
            thread_service: Thread service
            ownership_service: Ownership checks (for the ``owned`` flag)
            attachment_settings: Attachment settings (for public URLs)
        """
        self.thread_service = thread_service
        self.ownership_service = ownership_service
        self.attachment_settings = attachment_settings

    async def execute(self, request: GetThreadRequest) -> GetThreadResponse:
        """Execute get thread flow.

        Steps:
        1. Assemble the thread window via the thread service
        2. Work out which comments the caller owns
        3. Convert domain nodes to response models

        Returns:
            Root threads in window order with the total approved root count
        """
        thread = await self.thread_service.fetch_thread(
            PageId(request.page_id), limit=request.limit, offset=request.offset
        )

        tokens = dict(request.session_tokens)
        owned = {
            str(comment_id)
            for comment_id in self.ownership_service.owned_ids(
                thread.comments(), tokens
            )
        }

        prefix = self.attachment_settings.public_prefix
        return GetThreadResponse(
            roots=[
                ThreadNodeResponse.from_domain(root, owned, prefix)
                for root in thread.roots
            ],
            total_root_count=thread.total_root_count,
            session_tokens=tokens if tokens != request.session_tokens else None,
        )
