import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

# Shared HTTP client for connection reuse, created on first use
_shared_client: Optional[httpx.AsyncClient] = None


def get_shared_client(timeout: float = 30.0) -> httpx.AsyncClient:
    global _shared_client
    if _shared_client is None or _shared_client.is_closed:
        _shared_client = httpx.AsyncClient(timeout=timeout)
        logger.info("Created shared HTTP client", extra={"timeout": timeout})
    return _shared_client


async def close_shared_client() -> None:
    global _shared_client
    if _shared_client is not None and not _shared_client.is_closed:
        await _shared_client.aclose()
    _shared_client = None
