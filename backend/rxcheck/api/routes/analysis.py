import logging
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from rxcheck.api.deps import get_session, to_http_error
from rxcheck.core.errors import AnalysisError
from rxcheck.schemas.analysis_schema import AnalysisResult, DrugEntry
from rxcheck.services.pipeline.analysis_pipeline import run_analysis
from rxcheck.services.session import AnalysisSession

router = APIRouter()
logger = logging.getLogger(__name__)


class AnalyzeRequest(BaseModel):
    drugs: List[DrugEntry] = Field(..., description="Drugs to analyze, in display order")


@router.post("/analyze", response_model=AnalysisResult)
async def analyze_drugs(request: AnalyzeRequest, session: AnalysisSession = Depends(get_session)):
    """
    Stateless analysis of an explicit drug list with the configured back end.
    The session selection is left untouched.
    """
    try:
        return await run_analysis(session.analyzer, request.drugs)
    except AnalysisError as e:
        raise to_http_error(e)
