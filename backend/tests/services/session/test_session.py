"""
Tests for the interactive session: debounced search, free-text entry and
analysis state handling.
"""

import asyncio

import pytest

from rxcheck.core.errors import ServiceError
from rxcheck.schemas.analysis_schema import AnalysisResult, DrugEntry, RiskLevel
from rxcheck.services.base_analyzer import InteractionAnalyzer
from rxcheck.services.session import AnalysisSession, SelectionState, SuggestionSearch


class FakeCatalog:
    """Stands in for DrugCatalogClient; optionally holds each search until released."""

    min_query_length = 3

    def __init__(self, results=None, gated=False):
        self.results = results or {}
        self.queries = []
        self.gated = gated
        self.started = {}
        self.release = {}

    async def search(self, query, resolve_identifiers=False):
        self.queries.append((query, resolve_identifiers))
        if self.gated:
            self.started.setdefault(query, asyncio.Event()).set()
            await self.release.setdefault(query, asyncio.Event()).wait()
        return list(self.results.get(query, []))


class FakeAnalyzer(InteractionAnalyzer):
    name = "fake"

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def analyze(self, drugs):
        self.calls.append(list(drugs))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _result(level=RiskLevel.LOW):
    return AnalysisResult(
        risk_level=level,
        summary="done",
        individual_analyses=[],
        interactions=[],
        combined_side_effects=[],
        disclaimer="",
    )


def _entry(id_, name):
    return DrugEntry(id=id_, name=name)


class TestSuggestionSearch:

    def test_keystrokes_within_window_issue_one_search(self):
        catalog = FakeCatalog({"advi": [_entry("p1", "Advil")]})
        search = SuggestionSearch(catalog, SelectionState(), debounce_seconds=0.05)

        async def scenario():
            first = search.on_input("adv")
            second = search.on_input("advi")
            await asyncio.wait({first, second})
            return first

        first = asyncio.run(scenario())

        assert first.cancelled()
        assert catalog.queries == [("advi", False)]
        assert [s.name for s in search.suggestions] == ["Advil"]

    def test_short_query_clears_without_searching(self):
        catalog = FakeCatalog()
        search = SuggestionSearch(catalog, SelectionState(), debounce_seconds=0)
        search.suggestions = [_entry("p1", "Advil")]

        async def scenario():
            return search.on_input("ad")

        assert asyncio.run(scenario()) is None
        assert search.suggestions == []
        assert catalog.queries == []

    def test_stale_in_flight_response_is_discarded(self):
        catalog = FakeCatalog(
            {"asp": [_entry("p1", "Aspirin Old")], "aspi": [_entry("p2", "Aspirin New")]},
            gated=True,
        )
        search = SuggestionSearch(catalog, SelectionState(), debounce_seconds=0)

        async def scenario():
            old = search.on_input("asp")
            await catalog.started.setdefault("asp", asyncio.Event()).wait()

            new = search.on_input("aspi")
            await catalog.started.setdefault("aspi", asyncio.Event()).wait()

            # newer response lands first, then the stale one
            catalog.release.setdefault("aspi", asyncio.Event()).set()
            await new
            catalog.release.setdefault("asp", asyncio.Event()).set()
            await old

        asyncio.run(scenario())

        assert [s.name for s in search.suggestions] == ["Aspirin New"]
        assert search.applied_query == "aspi"

    def test_filters_selected_names(self):
        selection = SelectionState()
        selection.add(_entry("mine", "advil"))
        catalog = FakeCatalog({"advi": [_entry("p1", "Advil"), _entry("p2", "Advil PM")]})
        search = SuggestionSearch(catalog, selection, debounce_seconds=0)

        async def scenario():
            await search.on_input("advi")

        asyncio.run(scenario())

        assert [s.name for s in search.suggestions] == ["Advil PM"]

    def test_resolve_flag_is_forwarded(self):
        catalog = FakeCatalog()
        search = SuggestionSearch(catalog, SelectionState(), debounce_seconds=0, resolve_identifiers=True)

        async def scenario():
            await search.on_input("warf")

        asyncio.run(scenario())

        assert catalog.queries == [("warf", True)]


class TestAnalysisSession:

    @pytest.fixture
    def catalog(self):
        return FakeCatalog({"advi": [_entry("p1", "Advil"), _entry("p2", "Advil PM")]})

    def test_add_from_input_prefers_first_suggestion(self, catalog):
        session = AnalysisSession(FakeAnalyzer([]), catalog, debounce_seconds=0)

        async def scenario():
            await session.suggest("advi")
            return session.add_from_input("advi")

        added = asyncio.run(scenario())

        assert added.id == "p1"
        assert session.selection.entries == (added,)
        assert session.search.suggestions == []

    @pytest.mark.parametrize("typed", ["advi ", "advi", " advi"])
    def test_add_from_input_ignores_surrounding_whitespace(self, typed):
        catalog = FakeCatalog({"advi ": [_entry("p1", "Advil")]})
        session = AnalysisSession(FakeAnalyzer([]), catalog, debounce_seconds=0)

        async def scenario():
            await session.suggest("advi ")
            return session.add_from_input(typed)

        added = asyncio.run(scenario())

        assert added.id == "p1"
        assert added.name == "Advil"

    def test_add_from_input_without_suggestions_is_free_text(self, catalog):
        session = AnalysisSession(FakeAnalyzer([]), catalog, debounce_seconds=0)

        added = session.add_from_input("  Grandma's Tonic ")

        assert added.name == "Grandma's Tonic"
        assert added.rxcui is None
        assert added.id

    def test_add_from_input_rejects_blank_and_duplicates(self, catalog):
        session = AnalysisSession(FakeAnalyzer([]), catalog, debounce_seconds=0)

        assert session.add_from_input("   ") is None
        assert session.add_from_input("Tonic") is not None
        assert session.add_from_input("TONIC") is None
        assert len(session.selection) == 1

    def test_suggest_excludes_already_selected(self, catalog):
        session = AnalysisSession(FakeAnalyzer([]), catalog, debounce_seconds=0)
        session.add(_entry("x", "ADVIL"))

        suggestions = asyncio.run(session.suggest("advi"))

        assert [s.name for s in suggestions] == ["Advil PM"]

    def test_successful_analysis_is_held(self, catalog, warfarin, aspirin):
        analyzer = FakeAnalyzer([_result(RiskLevel.HIGH)])
        session = AnalysisSession(analyzer, catalog)
        session.add(warfarin)
        session.add(aspirin)

        result = asyncio.run(session.analyze())

        assert result.risk_level == RiskLevel.HIGH
        assert session.result is result
        assert session.error is None
        assert session.loading is False
        assert analyzer.calls == [[warfarin, aspirin]]

    def test_failure_clears_result_and_retry_runs_fresh(self, catalog, warfarin, aspirin):
        analyzer = FakeAnalyzer([
            _result(),
            ServiceError("Service unavailable (Status: 503)", status_code=503),
            _result(RiskLevel.MODERATE),
        ])
        session = AnalysisSession(analyzer, catalog)
        session.add(warfarin)
        session.add(aspirin)

        asyncio.run(session.analyze())
        assert asyncio.run(session.analyze()) is None
        assert session.result is None
        assert session.error == "Service unavailable (Status: 503)"
        assert isinstance(session.last_exception, ServiceError)

        retried = asyncio.run(session.analyze())
        assert retried.risk_level == RiskLevel.MODERATE
        assert session.error is None
        assert session.last_exception is None
        assert len(analyzer.calls) == 3

    def test_selection_change_during_analysis_discards_result(self, catalog, warfarin, aspirin, unresolved):
        gate = {}

        class SlowAnalyzer(InteractionAnalyzer):
            async def analyze(self, drugs):
                await gate["release"].wait()
                return _result(RiskLevel.SEVERE)

        session = AnalysisSession(SlowAnalyzer(), catalog)
        session.add(warfarin)
        session.add(aspirin)

        async def scenario():
            gate["release"] = asyncio.Event()
            task = asyncio.get_running_loop().create_task(session.analyze())
            await asyncio.sleep(0.01)
            session.add(unresolved)
            gate["release"].set()
            return await task

        assert asyncio.run(scenario()) is None
        assert session.result is None

    def test_remove_and_clear(self, catalog, warfarin, aspirin):
        session = AnalysisSession(FakeAnalyzer([_result()]), catalog)
        session.add(warfarin)
        session.add(aspirin)
        asyncio.run(session.analyze())

        session.remove(warfarin.id)
        assert session.result is None
        assert session.selection.entries == (aspirin,)

        session.clear()
        assert len(session.selection) == 0
