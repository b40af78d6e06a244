import logging
from typing import Optional, Sequence

import httpx
from pydantic import ValidationError

from rxcheck.core.config import Settings
from rxcheck.core.errors import DataFormatError, InputError, UpstreamError
from rxcheck.schemas.analysis_schema import AnalysisResult, DrugEntry
from rxcheck.services.base_analyzer import InteractionAnalyzer
from .gemini_client import GeminiClient
from .prompt_builder import ANALYSIS_RESPONSE_SCHEMA, SYSTEM_INSTRUCTION, build_analysis_prompt

logger = logging.getLogger(__name__)


class StructuredAnalyzer(InteractionAnalyzer):
    """
    Interaction analysis by a schema-constrained generative model.

    The model's JSON is trusted as the report; it is only parsed, never
    remapped or repaired. Anything that does not parse into AnalysisResult
    is a DataFormatError.
    """

    name = "gemini"
    requires_identifiers = False

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        gemini: Optional[GeminiClient] = None,
    ):
        self.gemini = gemini or GeminiClient(settings, client=client)

    async def analyze(self, drugs: Sequence[DrugEntry]) -> AnalysisResult:
        if not drugs:
            raise InputError("No drugs provided for analysis.")

        prompt = build_analysis_prompt(drugs)
        text = await self.gemini.generate_json(prompt, SYSTEM_INSTRUCTION, ANALYSIS_RESPONSE_SCHEMA)

        if not text:
            logger.error("Gemini returned no text for %d drugs", len(drugs))
            raise UpstreamError("Failed to generate analysis.")

        try:
            return AnalysisResult.model_validate_json(text)
        except ValidationError as e:
            logger.error("JSON parse error in analysis result: %s", e.errors()[:3])
            raise DataFormatError("Failed to parse analysis results.") from e
