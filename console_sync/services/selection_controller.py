"""Per-screen list state: filters, moderation tab, page and selection."""

from collections.abc import Iterable
from typing import Any

import structlog

from console_sync.constants import FIRST_PAGE
from console_sync.enums.resource import ResourceKind
from console_sync.enums.review import ReviewView
from console_sync.enums.transition import Transition
from console_sync.exceptions import InvalidQueryError
from console_sync.schemas.batch_result import BatchResult
from console_sync.schemas.page import Page
from console_sync.services.batch_executor import MutationExecutor
from console_sync.services.fetch_composer import FetchComposer

logger = structlog.get_logger(__name__)


class SelectionController:
    """State behind one list screen (notifications panel or moderation table).

    Changing a filter or tab always returns to the first page. After a
    batch run the selection keeps exactly the identifiers that failed, so
    the user can retry just those.
    """

    def __init__(
        self,
        kind: ResourceKind | str,
        composer: FetchComposer,
        executor: MutationExecutor,
        page_size: int | None = None,
    ) -> None:
        self.kind = ResourceKind(kind)
        self.composer = composer
        self.executor = executor
        self.page_size = page_size
        self.filters: dict[str, Any] = {}
        self.page = FIRST_PAGE
        self.view: ReviewView | None = (
            ReviewView.ALL if self.kind is ResourceKind.REVIEWS else None
        )
        self._selected: dict[str, None] = {}
        self.last_result: BatchResult | None = None

    @property
    def selected_ids(self) -> list[str]:
        """Selected identifiers in selection order."""
        return list(self._selected)

    def set_filter(self, name: str, value: Any) -> None:
        self.set_filters(**{name: value})

    def set_filters(self, **filters: Any) -> None:
        """Update filters and return to the first page.

        A None or blank value removes the filter.
        """
        self.filters.update(filters)
        self.filters = {
            name: value
            for name, value in self.filters.items()
            if value is not None and value != ""
        }
        self.page = FIRST_PAGE

    def set_view(self, view: ReviewView | str) -> None:
        """Switch moderation tab: filter by its status, first page, no selection."""
        if self.kind is not ResourceKind.REVIEWS:
            raise InvalidQueryError("Moderation views only apply to reviews")

        self.view = ReviewView(view)
        self.filters["status"] = self.view.status_filter
        self.set_filters()
        self.clear_selection()
        logger.debug("Moderation view changed", view=self.view.value)

    def set_page(self, page: int) -> None:
        if not isinstance(page, int) or page < FIRST_PAGE:
            raise InvalidQueryError(f"Page must be a positive integer, got: {page!r}")
        self.page = page

    def toggle(self, item_id: str) -> None:
        if item_id in self._selected:
            del self._selected[item_id]
        else:
            self._selected[item_id] = None

    def select_all(self, ids: Iterable[str]) -> None:
        """Replace the selection with ``ids``."""
        self._selected = dict.fromkeys(ids)

    def clear_selection(self) -> None:
        self._selected = {}

    def load(self) -> Page:
        """Fetch the current page for the current filters."""
        return self.composer.fetch(self.kind, self.filters, self.page, self.page_size)

    def run(self, transition: Transition | str, **options: Any) -> BatchResult:
        """Apply a transition to the selection.

        Keyword options are passed to ``MutationExecutor.run_batch_transition``.

        Returns:
            The batch report, also kept as ``last_result``
        """
        result = self.executor.run_batch_transition(
            self.kind, self.selected_ids, transition, self.view, **options
        )
        self.last_result = result
        self.select_all(result.retry_ids())

        logger.info(
            "Selection transition finished",
            kind=self.kind.value,
            summary=result.summary(),
            retained=len(self._selected),
        )
        return result
