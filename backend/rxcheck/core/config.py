"""
Configuration for rxcheck.
Centralizes upstream endpoints, the generative-model credential and the
tunables used by catalog search and analysis.
"""

import os
from functools import lru_cache
from typing import Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field


AnalysisBackend = Literal["gemini", "rxnav"]


class Settings(BaseModel):
    """Explicitly constructed settings, passed into the components that need them."""

    # Generative back end
    gemini_api_key: str = Field(
        default="",
        description="Credential for the Gemini generateContent endpoint"
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model used for structured analysis"
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Gemini REST API"
    )

    # Public drug APIs
    openfda_base_url: str = Field(
        default="https://api.fda.gov",
        description="Base URL of the openFDA API (drug product search)"
    )
    rxnav_base_url: str = Field(
        default="https://rxnav.nlm.nih.gov/REST",
        description="Base URL of the NLM RxNav REST API"
    )

    analysis_backend: AnalysisBackend = Field(
        default="gemini",
        description="Which analyzer answers analysis requests: gemini or rxnav"
    )

    # Candidate search
    search_limit: int = Field(
        default=5,
        ge=1,
        description="Raw results requested from the catalog before deduplication"
    )
    min_query_length: int = Field(
        default=3,
        ge=1,
        description="Queries shorter than this never reach the catalog"
    )
    debounce_seconds: float = Field(
        default=0.3,
        ge=0.0,
        description="Quiet period after the last keystroke before searching"
    )

    # Transport
    http_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Default timeout of the shared HTTP client, in seconds"
    )

    log_level: str = Field(default="INFO", description="Root log level")


_ENV_VARS = {
    "gemini_api_key": ("GEMINI_API_KEY", "API_KEY"),
    "gemini_model": ("GEMINI_MODEL",),
    "gemini_base_url": ("GEMINI_BASE_URL",),
    "openfda_base_url": ("OPENFDA_BASE_URL",),
    "rxnav_base_url": ("RXNAV_BASE_URL",),
    "analysis_backend": ("RXCHECK_BACKEND",),
    "http_timeout": ("RXCHECK_HTTP_TIMEOUT",),
    "log_level": ("RXCHECK_LOG_LEVEL",),
}


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment (and a .env file, if one is found),
    then apply keyword overrides.
    """
    load_dotenv(find_dotenv())

    values = {}
    for field_name, env_names in _ENV_VARS.items():
        for env_name in env_names:
            raw = os.environ.get(env_name, "").strip()
            if raw:
                values[field_name] = raw
                break

    values.update(overrides)
    return Settings(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings for the HTTP app."""
    return load_settings()
