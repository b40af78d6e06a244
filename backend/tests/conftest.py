"""
Shared fixtures: settings that never touch the environment, and a recording
fake upstream built on httpx.MockTransport.
"""

import json

import httpx
import pytest

from rxcheck.core.config import Settings
from rxcheck.schemas.analysis_schema import DrugEntry


class FakeUpstream:
    """Routes requests by URL substring to canned responses and records every request."""

    def __init__(self):
        self.routes = []
        self.requests = []

    def add(self, url_part, status=200, body=None, text=None, error=None):
        self.routes.append((url_part, status, body, text, error))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for url_part, status, body, text, error in self.routes:
            if url_part in str(request.url):
                if error is not None:
                    raise error(f"simulated failure for {url_part}", request=request)
                if text is not None:
                    return httpx.Response(status, text=text)
                return httpx.Response(status, json=body if body is not None else {})
        return httpx.Response(404, json={"error": "no route"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def calls_to(self, url_part):
        return [r for r in self.requests if url_part in str(r.url)]

    def json_body(self, index=0):
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-key", debounce_seconds=0.0)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def warfarin():
    return DrugEntry(id="w1", name="Coumadin", rxcui="855332", generic_name="warfarin")


@pytest.fixture
def aspirin():
    return DrugEntry(id="a1", name="Bayer", rxcui="1191", generic_name="aspirin")


@pytest.fixture
def unresolved():
    return DrugEntry(id="x1", name="Mystery Tonic")


def rxnav_pair(description, drug_a, drug_b):
    return {
        "description": description,
        "severity": "N/A",
        "interactionConcept": [
            {"minConceptItem": {"rxcui": "1", "name": drug_a, "tty": "IN"}},
            {"minConceptItem": {"rxcui": "2", "name": drug_b, "tty": "IN"}},
        ],
    }


def rxnav_payload(*pairs):
    return {
        "nlmDisclaimer": "It is not the intention of NLM to provide specific medical advice.",
        "fullInteractionTypeGroup": [
            {
                "sourceName": "DrugBank",
                "fullInteractionType": [{"interactionPair": list(pairs)}],
            }
        ],
    }


def gemini_envelope(text):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


@pytest.fixture
def make_pair():
    return rxnav_pair


@pytest.fixture
def make_payload():
    return rxnav_payload


@pytest.fixture
def make_envelope():
    return gemini_envelope
