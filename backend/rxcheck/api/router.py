from fastapi import APIRouter
from rxcheck.api.routes import analysis, drugs, session

api_router = APIRouter()

api_router.include_router(drugs.router, prefix="/drugs", tags=["Drugs"])
api_router.include_router(session.router, prefix="/session", tags=["Session"])
api_router.include_router(analysis.router, tags=["Analysis"])
