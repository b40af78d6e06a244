import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from rxcheck.api.deps import get_session, to_http_error
from rxcheck.schemas.analysis_schema import AnalysisResult, DrugEntry
from rxcheck.services.session import AnalysisSession
from rxcheck.services.session.session import new_entry_id

router = APIRouter()
logger = logging.getLogger(__name__)


class SessionState(BaseModel):
    drugs: List[DrugEntry]
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None
    loading: bool = False


class AddDrugRequest(BaseModel):
    """Either a picked suggestion (name, optional id/rxcui/genericName) or raw typed text."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, description="Display name of a picked suggestion")
    id: Optional[str] = None
    rxcui: Optional[str] = None
    generic_name: Optional[str] = Field(None, alias="genericName")
    text: Optional[str] = Field(None, description="Free text typed into the input box")


def _state(session: AnalysisSession) -> SessionState:
    return SessionState(
        drugs=list(session.selection.entries),
        result=session.result,
        error=session.error,
        loading=session.loading,
    )


@router.get("", response_model=SessionState)
async def get_state(session: AnalysisSession = Depends(get_session)):
    return _state(session)


@router.post("/drugs", response_model=DrugEntry, status_code=status.HTTP_201_CREATED)
async def add_drug(request: AddDrugRequest, session: AnalysisSession = Depends(get_session)):
    if request.name and request.name.strip():
        entry = DrugEntry(
            id=request.id or new_entry_id(),
            name=request.name.strip(),
            rxcui=request.rxcui,
            generic_name=request.generic_name,
        )
        added = entry if session.add(entry) else None
    elif request.text and request.text.strip():
        added = session.add_from_input(request.text)
    else:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A drug name is required.")

    if added is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Drug is already selected.")
    return added


@router.delete("/drugs/{drug_id}", response_model=SessionState)
async def remove_drug(drug_id: str, session: AnalysisSession = Depends(get_session)):
    session.remove(drug_id)
    return _state(session)


@router.delete("", response_model=SessionState)
async def clear_session(session: AnalysisSession = Depends(get_session)):
    session.clear()
    return _state(session)


@router.post("/analyze", response_model=AnalysisResult)
async def analyze_session(session: AnalysisSession = Depends(get_session)):
    """Analyze the current selection; failures map like the stateless route."""
    result = await session.analyze()
    if result is None:
        if session.last_exception is not None:
            raise to_http_error(session.last_exception)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Selection changed during analysis.")
    return result
