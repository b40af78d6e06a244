"""
Analysis Session - the single interactive session.

Owns the selection, the suggestion search and the current result/error.
State only changes in response to a completed user action or a completed
network response.
"""

import asyncio
import logging
import uuid
from typing import Optional

import httpx

from rxcheck.core.config import Settings
from rxcheck.core.errors import AnalysisError
from rxcheck.schemas.analysis_schema import AnalysisResult, DrugEntry
from rxcheck.services.base_analyzer import InteractionAnalyzer
from rxcheck.services.catalog.drug_catalog import DrugCatalogClient
from rxcheck.services.pipeline.analysis_pipeline import create_analyzer, run_analysis
from .search import SuggestionSearch
from .selection import SelectionState

logger = logging.getLogger(__name__)


def new_entry_id() -> str:
    return uuid.uuid4().hex[:9]


class AnalysisSession:

    def __init__(
        self,
        analyzer: InteractionAnalyzer,
        catalog: DrugCatalogClient,
        debounce_seconds: float = 0.3,
    ):
        self.analyzer = analyzer
        self.catalog = catalog
        self.selection = SelectionState()
        self.search = SuggestionSearch(
            catalog,
            self.selection,
            debounce_seconds=debounce_seconds,
            resolve_identifiers=analyzer.requires_identifiers,
        )
        self.loading = False
        self.last_exception: Optional[AnalysisError] = None

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self.selection.result

    @property
    def error(self) -> Optional[str]:
        return self.selection.error

    # ----------------------------
    # Selection
    # ----------------------------
    def add(self, entry: DrugEntry) -> bool:
        added = self.selection.add(entry)
        if added:
            self.search.reset()
        else:
            logger.info("Rejected duplicate drug %s", entry.name)
        return added

    def add_from_input(self, text: str) -> Optional[DrugEntry]:
        """
        Add what the user typed: the first live suggestion if there is one,
        otherwise a free-text entry with a fresh id.
        """
        name = (text or "").strip()
        if not name:
            return None

        if self.search.suggestions and (self.search.applied_query or "").strip() == name:
            entry = self.search.suggestions[0]
        else:
            entry = DrugEntry(id=new_entry_id(), name=name)

        return entry if self.add(entry) else None

    def remove(self, drug_id: str) -> bool:
        removed = self.selection.remove(drug_id)
        self.search.refresh()
        return removed

    def clear(self) -> None:
        self.selection.clear()
        self.search.reset()

    # ----------------------------
    # Search
    # ----------------------------
    async def suggest(self, query: str):
        """Feed one input value through the debounced search and wait for it to settle."""
        task = self.search.on_input(query)
        if task is not None:
            # a cancelled task (superseded by newer input) simply finishes the wait
            await asyncio.wait({task})
        return list(self.search.suggestions) if self.search.applied_query == query else []

    # ----------------------------
    # Analysis
    # ----------------------------
    async def analyze(self) -> Optional[AnalysisResult]:
        """
        Analyze the current selection. A failure clears any result and
        records a single message; nothing is cached between attempts.
        """
        self.selection.invalidate()
        self.last_exception = None
        self.loading = True
        version = self.selection.version
        try:
            result = await run_analysis(self.analyzer, self.selection.snapshot())
        except AnalysisError as e:
            if self.selection.version != version:
                return None
            self.last_exception = e
            self.selection.set_error(e.message or "An unexpected error occurred during analysis.")
            return None
        finally:
            self.loading = False

        if self.selection.version != version:
            logger.info("Selection changed during analysis; discarding result")
            return None

        self.selection.set_result(result)
        return result


def create_session(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> AnalysisSession:
    return AnalysisSession(
        analyzer=create_analyzer(settings, client=client),
        catalog=DrugCatalogClient(settings, client=client),
        debounce_seconds=settings.debounce_seconds,
    )
