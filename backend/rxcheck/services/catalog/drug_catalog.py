"""
Drug Catalog - candidate lookup against openFDA and RxNorm identifier resolution.

Search is advisory: every failure degrades to "no candidates" so a free-text
drug name can always still be entered.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from rxcheck.core.config import Settings
from rxcheck.core.http import get_shared_client
from rxcheck.schemas.analysis_schema import DrugEntry

logger = logging.getLogger(__name__)


def _entry_from_product(item: Dict[str, Any]) -> Optional[DrugEntry]:
    """Map one openFDA NDC product record; records without id or brand name are skipped."""
    product_id = item.get("product_id")
    brand_name = item.get("brand_name")
    if not isinstance(product_id, str) or not isinstance(brand_name, str) or not brand_name.strip():
        return None
    generic_name = item.get("generic_name")
    return DrugEntry(
        id=product_id,
        name=brand_name,
        generic_name=generic_name if isinstance(generic_name, str) else None,
    )


def dedupe_by_name(entries: List[DrugEntry]) -> List[DrugEntry]:
    """Keep the first entry for each exact name (package sizes share a brand name)."""
    seen = set()
    unique = []
    for entry in entries:
        if entry.name in seen:
            continue
        seen.add(entry.name)
        unique.append(entry)
    return unique


class DrugCatalogClient:

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.search_endpoint = f"{settings.openfda_base_url.rstrip('/')}/drug/ndc.json"
        self.rxcui_endpoint = f"{settings.rxnav_base_url.rstrip('/')}/rxcui.json"
        self.limit = settings.search_limit
        self.min_query_length = settings.min_query_length
        self._client = client

    @property
    def http(self) -> httpx.AsyncClient:
        return self._client or get_shared_client(self.settings.http_timeout)

    async def search(self, query: str, resolve_identifiers: bool = False) -> List[DrugEntry]:
        """
        Prefix search on brand name. Short queries never reach the network.

        Args:
            query: Partial drug name as typed.
            resolve_identifiers: Also look up an RxCUI for each candidate.

        Returns:
            Candidates deduplicated by name, at most `search_limit` of them.
        """
        if not query or len(query) < self.min_query_length:
            return []

        params = {"search": f'brand_name:"{query}*"', "limit": self.limit}
        try:
            response = await self.http.get(self.search_endpoint, params=params)
            if not response.is_success:
                logger.warning("Drug search returned status %s", response.status_code)
                return []
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Drug search failed: %s", e)
            return []

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            return []

        entries = [e for e in (_entry_from_product(r) for r in results if isinstance(r, dict)) if e]
        entries = dedupe_by_name(entries)

        if resolve_identifiers and entries:
            entries = list(await asyncio.gather(*(self.resolve(e) for e in entries)))

        logger.info("Drug search complete", extra={"query": query, "results": len(entries)})
        return entries

    async def resolve_rxcui(self, name: str) -> Optional[str]:
        """First RxNorm id for a name (normalized search), or None."""
        if not name or not name.strip():
            return None
        try:
            response = await self.http.get(
                self.rxcui_endpoint, params={"name": name.strip(), "search": 1}
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("RxCUI lookup failed for %s: %s", name, e)
            return None

        id_group = data.get("idGroup") if isinstance(data, dict) else None
        ids = (id_group or {}).get("rxnormId") or []
        return str(ids[0]) if ids else None

    async def resolve(self, entry: DrugEntry) -> DrugEntry:
        """Attach an RxCUI, trying the display name then the generic name."""
        if entry.rxcui:
            return entry
        for name in (entry.name, entry.generic_name):
            if not name:
                continue
            rxcui = await self.resolve_rxcui(name)
            if rxcui:
                return entry.model_copy(update={"rxcui": rxcui})
        return entry
