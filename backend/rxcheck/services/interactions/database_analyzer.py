"""
Database Analyzer - pairwise interactions from the NLM RxNav interaction API.

Sends the resolved RxCUIs of the selection in one request, classifies each
returned pair with the text heuristics and escalates an overall risk level.
"""

import logging
import time
from typing import List, Optional, Sequence

import httpx
from pydantic import ValidationError

from rxcheck.core.config import Settings
from rxcheck.core.errors import DataFormatError, ServiceError
from rxcheck.core.http import get_shared_client
from rxcheck.schemas.analysis_schema import (
    AnalysisResult,
    CombinedEffect,
    DrugEntry,
    IndividualDrugAnalysis,
    InteractionDetail,
    RiskLevel,
)
from rxcheck.schemas.internal_contracts import InteractionListResponse, InteractionPair
from rxcheck.services.base_analyzer import InteractionAnalyzer
from .severity import aggregate_risk, classify_severity, extract_symptom

logger = logging.getLogger(__name__)

GENERIC_MECHANISM = "Pharmacological Interaction"
MANAGEMENT_TIPS = (
    "Consult your doctor about this interaction.",
    "Do not stop medication without advice.",
)

NO_INTERACTIONS_SUMMARY = "No known interactions were found between the selected medications."
UNIDENTIFIED_SUMMARY = (
    "Unable to analyze. Please delete the drugs and re-add them by selecting "
    "from the dropdown menu to ensure they are recognized."
)
TOO_FEW_SUMMARY = "Please add at least two recognized medications to check for interactions."

ID_VERIFIED_NOTE = "ID verified."
ID_MISSING_NOTE = "Drug ID not found. Please re-add from suggestions."
LABELING_NOTE = "Refer to official labeling."

DEGRADED_DISCLAIMER = "Data provided by NLM. Always consult a healthcare professional."
DISCLAIMER = (
    "Interaction data sourced from National Library of Medicine (RxNav). "
    "This tool does not provide medical advice."
)


def build_summary(pair_count: int, max_severity: RiskLevel) -> str:
    if pair_count == 0:
        return NO_INTERACTIONS_SUMMARY
    plural = "s" if pair_count > 1 else ""
    return (
        f"Found {pair_count} potential interaction{plural}. "
        f"The highest risk level is {max_severity.value}."
    )


def parse_interaction_pairs(payload) -> List[InteractionPair]:
    """
    Flatten group -> type -> pair. Valid JSON without the group key yields
    no pairs; a group list that does not match the expected shape is a
    DataFormatError.
    """
    if not isinstance(payload, dict):
        return []
    try:
        envelope = InteractionListResponse.model_validate(payload)
    except ValidationError as e:
        logger.error("Unexpected RxNav interaction payload: %s", e.errors()[:3])
        raise DataFormatError(
            "Received invalid data from NLM database. Please try again later."
        ) from e
    return envelope.pairs()


class DatabaseAnalyzer(InteractionAnalyzer):
    """Interaction analysis backed by the RxNav interaction list endpoint."""

    name = "rxnav"
    requires_identifiers = True

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.base_url = settings.rxnav_base_url.rstrip("/")
        self._client = client

    @property
    def http(self) -> httpx.AsyncClient:
        return self._client or get_shared_client(self.settings.http_timeout)

    async def analyze(self, drugs: Sequence[DrugEntry]) -> AnalysisResult:
        drugs = list(drugs)
        identified = [d for d in drugs if d.rxcui]

        if len(identified) < 2:
            logger.info(
                "Skipping RxNav lookup: %d of %d drugs identified", len(identified), len(drugs)
            )
            return self._degraded_result(drugs, identified)

        start_time = time.time()
        payload = await self._fetch_interactions([d.rxcui for d in identified])
        pairs = parse_interaction_pairs(payload)

        interactions: List[InteractionDetail] = []
        combined: List[CombinedEffect] = []
        for pair in pairs:
            severity = classify_severity(pair.description)
            interactions.append(InteractionDetail(
                drugs_involved=pair.drug_names,
                mechanism=GENERIC_MECHANISM,
                severity=severity,
                description=pair.description,
            ))
            combined.append(CombinedEffect(
                symptom=extract_symptom(pair.description),
                description=pair.description,
                management_tips=MANAGEMENT_TIPS,
            ))

        max_severity = aggregate_risk(i.severity for i in interactions)

        logger.info(
            "RxNav analysis complete",
            extra={"pairs": len(interactions), "risk": max_severity.value,
                   "elapsed": round(time.time() - start_time, 3)},
        )

        return AnalysisResult(
            risk_level=RiskLevel.LOW if not interactions else max_severity,
            summary=build_summary(len(interactions), max_severity),
            individual_analyses=[
                IndividualDrugAnalysis(drug_name=d.name, usage_summary=LABELING_NOTE)
                for d in drugs
            ],
            interactions=interactions,
            combined_side_effects=combined,
            disclaimer=DISCLAIMER,
        )

    async def _fetch_interactions(self, rxcuis: List[str]):
        # '+' must reach RxNav unescaped, so the query string is built by hand
        url = f"{self.base_url}/interaction/list.json?rxcuis={'+'.join(rxcuis)}"
        logger.info("Sending request to RxNav", extra={"rxcuis": len(rxcuis)})

        try:
            response = await self.http.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("RxNav returned status %s", status)
            raise ServiceError(f"Service unavailable (Status: {status})", status_code=status) from e
        except httpx.RequestError as e:
            logger.error("Error communicating with RxNav: %s", e)
            raise ServiceError("Failed to fetch interaction data from NLM.") from e

        try:
            return response.json()
        except ValueError as e:
            logger.error("Invalid JSON from RxNav: %.200s", response.text)
            raise DataFormatError(
                "Received invalid data from NLM database. Please try again later."
            ) from e

    def _degraded_result(self, drugs: List[DrugEntry], identified: List[DrugEntry]) -> AnalysisResult:
        has_unidentified = len(drugs) >= 2
        return AnalysisResult(
            risk_level=RiskLevel.UNKNOWN,
            summary=UNIDENTIFIED_SUMMARY if has_unidentified else TOO_FEW_SUMMARY,
            individual_analyses=[
                IndividualDrugAnalysis(
                    drug_name=d.name,
                    usage_summary=ID_VERIFIED_NOTE if d.rxcui else ID_MISSING_NOTE,
                )
                for d in drugs
            ],
            interactions=[],
            combined_side_effects=[],
            disclaimer=DEGRADED_DISCLAIMER,
        )
