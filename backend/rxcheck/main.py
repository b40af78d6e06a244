from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rxcheck import __version__
from rxcheck.api.router import api_router
from rxcheck.core.config import Settings, get_settings
from rxcheck.core.http import close_shared_client
from rxcheck.core.logging import setup_logging
from rxcheck.services.session import AnalysisSession, create_session


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_shared_client()


def create_app(settings: Optional[Settings] = None, session: Optional[AnalysisSession] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="rxcheck API",
        description="Medication interaction checker backed by Gemini or NLM RxNav",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.session = session or create_session(settings)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        return {
            "status": "ok",
            "service": "rxcheck",
            "backend": app.state.session.analyzer.name,
        }

    return app


app = create_app()
