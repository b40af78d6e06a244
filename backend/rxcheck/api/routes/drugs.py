from typing import List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from rxcheck.api.deps import get_session
from rxcheck.schemas.analysis_schema import DrugEntry
from rxcheck.services.session import AnalysisSession

router = APIRouter()


class SearchResponse(BaseModel):
    query: str
    suggestions: List[DrugEntry]


@router.get("/search", response_model=SearchResponse)
async def search_drugs(
    q: str = Query("", description="Partial drug name as typed"),
    session: AnalysisSession = Depends(get_session),
):
    """
    Candidate drugs for the input box, minus those already selected.
    Queries shorter than three characters return no suggestions.
    """
    suggestions = await session.suggest(q)
    return SearchResponse(query=q, suggestions=suggestions)
