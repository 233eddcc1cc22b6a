"""
client/api.py - HTTP Client for the Advocate Directory API

Thin async wrapper over httpx used by the list controller:
- One persistent AsyncClient per API client (connection pooling)
- Typed responses parsed with the shared Pydantic schemas
- Non-2xx responses raise httpx.HTTPStatusError

No timeout is configured here; httpx transport defaults apply.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import httpx

import schemas

logger = logging.getLogger(__name__)

QueryParams = Sequence[Tuple[str, str]]


class AdvocatesApiClient:
    """
    Client for the advocate list and facet endpoints.

    Args:
        base_url: API root, e.g. "http://localhost:8000"
        http_client: Pre-built AsyncClient (tests pass one with a mock or
            ASGI transport). When given, base_url is ignored.
    """

    def __init__(self, base_url: str = "", http_client: Optional[httpx.AsyncClient] = None):
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )

    async def __aenter__(self) -> "AdvocatesApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client and not self._http.is_closed:
            await self._http.aclose()
            logger.debug("HTTP client closed")

    async def _get_json(self, path: str, params: Optional[QueryParams] = None) -> dict:
        response = await self._http.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def list_advocates(self, params: QueryParams) -> schemas.AdvocateList:
        """
        Fetch one page of advocates.

        Args:
            params: Query string as (key, value) pairs; keys may repeat

        Returns:
            schemas.AdvocateList: Rows and pagination metadata
        """
        payload = await self._get_json("/api/advocates", params=list(params))
        return schemas.AdvocateList.model_validate(payload)

    async def list_cities(self) -> List[str]:
        payload = await self._get_json("/api/advocates/cities")
        return schemas.CityList.model_validate(payload).cities

    async def list_degrees(self) -> List[str]:
        payload = await self._get_json("/api/advocates/degrees")
        return schemas.DegreeList.model_validate(payload).degrees

    async def list_specialties(self) -> List[str]:
        payload = await self._get_json("/api/advocates/specialties")
        return schemas.SpecialtyList.model_validate(payload).specialties
