"""Dashboard state: browsing, selecting and triaging feedback."""

import logging
from typing import Literal

from axiom_api.config import get_settings
from axiom_api.dashboard.client import DashboardError, FeedbackApiClient
from axiom_api.dashboard.filters import FilterState, FilterStorage
from axiom_api.schemas.base import BaseSchema
from axiom_api.schemas.feedback import FeedbackResponse

settings = get_settings()
logger = logging.getLogger(__name__)


class DeleteConfirmation(BaseSchema):
    """A delete waiting for the user to confirm."""

    feedback_ids: list[str]
    type: Literal["single", "bulk"]
    is_open: bool = True


class FeedbackDashboard:
    """Client-side state behind the feedback dashboard.

    Every filter or pagination change refetches the current page. Deletes and
    next-action edits update local state in place instead of refetching.
    Failures are exposed through ``error``; nothing is retried.
    """

    def __init__(
        self,
        client: FeedbackApiClient,
        storage: FilterStorage | None = None,
        page_size: int | None = None,
    ) -> None:
        self.client = client
        self.storage = storage or FilterStorage()
        self.filters = FilterState()

        self.page = 1
        self.page_size = page_size or settings.dashboard_page_size

        self.feedbacks: list[FeedbackResponse] = []
        self.total = 0
        self.has_more = False
        self.is_loading = False
        self.error: str | None = None
        self.all_available_tags: list[str] = []

        self.selected_ids: list[str] = []
        self.deleting_ids: list[str] = []
        self.delete_confirmation: DeleteConfirmation | None = None
        self.is_updating = False

    async def load(self) -> None:
        """Restore saved filters, then fetch tags and the first page."""
        self.filters = self.storage.load()
        await self.refresh_tags()
        await self.refetch()

    async def refetch(self) -> None:
        self.is_loading = True
        self.error = None

        params = [("page", str(self.page)), ("pageSize", str(self.page_size))]
        params += self.filters.to_params()

        try:
            feedbacks, pagination = await self.client.list_feedback(params)
        except DashboardError as e:
            self.error = e.message
        else:
            self.feedbacks = feedbacks
            self.total = pagination["total"]
            self.has_more = pagination["hasMore"]
            visible_ids = {feedback.id for feedback in feedbacks}
            self.selected_ids = [feedback_id for feedback_id in self.selected_ids if feedback_id in visible_ids]
        finally:
            self.is_loading = False

    async def refresh_tags(self) -> None:
        try:
            self.all_available_tags = await self.client.list_tags()
        except DashboardError as e:
            logger.error(f"Failed to fetch all tags: {e.message}")

    @property
    def available_tags(self) -> list[str]:
        """Tags present on the currently loaded page."""
        return sorted({tag for feedback in self.feedbacks for tag in feedback.analysis.tags if tag.strip()})

    @property
    def active_filter_count(self) -> int:
        return self.filters.active_count

    # Filters

    async def _apply_filters(self, filters: FilterState) -> None:
        self.filters = filters
        self.storage.save(filters)
        self.page = 1
        await self.refetch()

    async def set_sentiments(self, sentiments: list[str]) -> None:
        await self._apply_filters(self.filters.model_copy(update={"sentiments": list(sentiments)}))

    async def set_priorities(self, priorities: list[str]) -> None:
        await self._apply_filters(self.filters.model_copy(update={"priorities": list(priorities)}))

    async def set_tags(self, tags: list[str]) -> None:
        await self._apply_filters(self.filters.model_copy(update={"tags": list(tags)}))

    async def set_search(self, query: str) -> None:
        await self._apply_filters(self.filters.model_copy(update={"search": query}))

    async def set_has_cat(self, has_cat: bool | None) -> None:
        await self._apply_filters(self.filters.model_copy(update={"has_cat": has_cat}))

    async def clear_filters(self) -> None:
        self.filters = FilterState()
        self.storage.clear()
        self.page = 1
        await self.refetch()

    # Pagination

    async def set_page(self, page: int) -> None:
        self.page = max(page, 1)
        await self.refetch()

    async def set_page_size(self, page_size: int) -> None:
        self.page_size = max(page_size, 1)
        self.page = 1
        await self.refetch()

    # Selection

    def select(self, feedback_ids: list[str]) -> None:
        self.selected_ids = list(feedback_ids)

    # Delete flow

    def request_delete(self, feedback_id: str) -> None:
        self.delete_confirmation = DeleteConfirmation(feedback_ids=[feedback_id], type="single")

    def request_bulk_delete(self, feedback_ids: list[str]) -> None:
        self.delete_confirmation = DeleteConfirmation(feedback_ids=list(feedback_ids), type="bulk")

    def cancel_delete(self) -> None:
        self.delete_confirmation = None

    async def confirm_delete(self) -> None:
        """Run the pending delete. Does nothing without a pending confirmation."""
        confirmation = self.delete_confirmation
        if confirmation is None:
            return

        self.deleting_ids = list(confirmation.feedback_ids)
        try:
            if confirmation.type == "single":
                await self.client.delete_feedback(confirmation.feedback_ids[0])
            else:
                await self.client.delete_feedbacks(confirmation.feedback_ids)
        except DashboardError as e:
            self.error = e.message
        else:
            self._remove_local(confirmation.feedback_ids)
            self.delete_confirmation = None
        finally:
            self.deleting_ids = []

    def _remove_local(self, feedback_ids: list[str]) -> None:
        removed = set(feedback_ids)
        remaining = [feedback for feedback in self.feedbacks if feedback.id not in removed]
        self.total = max(self.total - (len(self.feedbacks) - len(remaining)), 0)
        self.feedbacks = remaining
        self.selected_ids = [feedback_id for feedback_id in self.selected_ids if feedback_id not in removed]

    # Update flow

    async def update_next_action(self, feedback_id: str, next_action: str) -> None:
        self.is_updating = True
        try:
            await self.client.update_next_action(feedback_id, next_action)
        except DashboardError as e:
            self.error = e.message
        else:
            for feedback in self.feedbacks:
                if feedback.id == feedback_id:
                    feedback.analysis.next_action = next_action.strip()
        finally:
            self.is_updating = False
