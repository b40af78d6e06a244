"""
Analysis Pipeline - selects the configured analyzer and runs one analysis.
"""

import logging
import time
from typing import Optional, Sequence

import httpx

from rxcheck.core.config import Settings
from rxcheck.core.errors import AnalysisError
from rxcheck.schemas.analysis_schema import AnalysisResult, DrugEntry
from rxcheck.services.base_analyzer import InteractionAnalyzer
from rxcheck.services.interactions.database_analyzer import DatabaseAnalyzer
from rxcheck.services.llm.structured_analyzer import StructuredAnalyzer

logger = logging.getLogger(__name__)

ANALYZERS = {
    "gemini": StructuredAnalyzer,
    "rxnav": DatabaseAnalyzer,
}


def create_analyzer(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> InteractionAnalyzer:
    analyzer_cls = ANALYZERS.get(settings.analysis_backend)
    if analyzer_cls is None:
        raise ValueError(f"Unknown analysis backend: {settings.analysis_backend!r}")
    return analyzer_cls(settings, client=client)


async def run_analysis(analyzer: InteractionAnalyzer, drugs: Sequence[DrugEntry]) -> AnalysisResult:
    """One analysis request; errors are logged and re-raised unchanged."""
    logger.info("Starting %s analysis for %d drugs", analyzer.name, len(drugs))
    start_time = time.time()

    try:
        result = await analyzer.analyze(list(drugs))
    except AnalysisError as e:
        logger.error("%s analysis failed: %s", analyzer.name, e)
        raise

    logger.info(
        "Analysis finished in %.2f seconds (risk level %s)",
        time.time() - start_time,
        result.risk_level.value,
    )
    return result
