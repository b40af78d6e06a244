import logging
from typing import Any, Dict, Optional

import httpx

from rxcheck.core.config import Settings
from rxcheck.core.errors import DataFormatError, ServiceError
from rxcheck.core.http import get_shared_client

logger = logging.getLogger(__name__)


class GeminiClient:
    """
    Client for the Gemini generateContent REST endpoint with schema-constrained
    JSON output. Transport and status failures surface as ServiceError; no
    retries are attempted.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.api_key = settings.gemini_api_key
        self.model = settings.gemini_model
        self.timeout = settings.http_timeout
        self.generate_endpoint = (
            f"{settings.gemini_base_url.rstrip('/')}/models/{self.model}:generateContent"
        )
        self._client = client

        if not self.api_key:
            logger.warning("GEMINI_API_KEY is not set; generative analysis will be rejected upstream")

    @property
    def http(self) -> httpx.AsyncClient:
        return self._client or get_shared_client(self.timeout)

    async def generate_json(
        self,
        prompt: str,
        system_instruction: str,
        response_schema: Dict[str, Any],
    ) -> Optional[str]:
        """
        Returns the generated JSON text, or None when the model produced no text.
        """
        logger.info("Sending request to Gemini", extra={"model": self.model})

        payload = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            },
        }

        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

        try:
            response = await self.http.post(self.generate_endpoint, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Gemini returned status {status}")
            raise ServiceError(
                f"Analysis service unavailable (Status: {status})", status_code=status
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Error communicating with Gemini: {str(e)}")
            raise ServiceError("Failed to reach the analysis service.") from e

        try:
            data = response.json()
        except ValueError as e:
            raise DataFormatError("Analysis service returned a malformed response.") from e

        text = self._extract_text(data)
        logger.info("Gemini request successful", extra={"response_length": len(text or "")})
        return text

    @staticmethod
    def _extract_text(data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        candidates = data.get("candidates") or []
        if not candidates or not isinstance(candidates[0], dict):
            return None
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        return text or None
