import asyncio
import logging
from typing import List, Optional

from rxcheck.schemas.analysis_schema import DrugEntry
from rxcheck.services.catalog.drug_catalog import DrugCatalogClient
from .selection import SelectionState

logger = logging.getLogger(__name__)


class SuggestionSearch:
    """
    Debounced candidate search for the drug input box.

    Each keystroke replaces the live query and cancels a search that is still
    waiting out the debounce window. A search whose request is already in
    flight is left to finish, but its results are only applied if it was
    issued for the query that is still live.
    """

    def __init__(
        self,
        catalog: DrugCatalogClient,
        selection: SelectionState,
        debounce_seconds: float = 0.3,
        resolve_identifiers: bool = False,
    ):
        self.catalog = catalog
        self.selection = selection
        self.debounce_seconds = debounce_seconds
        self.resolve_identifiers = resolve_identifiers

        self.live_query: str = ""
        self.suggestions: List[DrugEntry] = []
        self.applied_query: Optional[str] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def is_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def on_input(self, query: str) -> Optional[asyncio.Task]:
        """
        Record a new input value. Must be called from a running event loop.
        Returns the scheduled search task, or None for too-short queries.
        """
        self.live_query = query

        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

        if len(query) < self.catalog.min_query_length:
            self.suggestions = []
            self.applied_query = query
            return None

        task = asyncio.get_running_loop().create_task(self._debounced_search(query))
        self._pending = task
        return task

    async def _debounced_search(self, query: str) -> None:
        await asyncio.sleep(self.debounce_seconds)

        # past the debounce window the request is in flight and no longer cancellable
        if self._pending is asyncio.current_task():
            self._pending = None

        results = await self.catalog.search(query, resolve_identifiers=self.resolve_identifiers)
        self._apply(query, results)

    def _apply(self, query: str, results: List[DrugEntry]) -> None:
        if query != self.live_query:
            logger.debug("Discarding stale suggestions for %r (live query %r)", query, self.live_query)
            return
        self.suggestions = [r for r in results if not self.selection.contains_name(r.name)]
        self.applied_query = query

    def refresh(self) -> None:
        """Re-filter current suggestions after the selection changed."""
        self.suggestions = [s for s in self.suggestions if not self.selection.contains_name(s.name)]

    def reset(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self.live_query = ""
        self.suggestions = []
        self.applied_query = None
