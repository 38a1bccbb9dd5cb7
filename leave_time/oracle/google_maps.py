"""Google Maps client — Distance Matrix and Time Zone APIs.

Only the two endpoints the solver's glue needs are wrapped.  Responses
are returned as parsed JSON; interpretation of elements happens in
HttpDurationOracle so this client stays a thin transport.

Any transport or HTTP-status failure surfaces as OracleError.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from leave_time.domain.enums import TrafficModel
from leave_time.domain.trip import LatLng
from leave_time.oracle.base import OracleError

logger = logging.getLogger(__name__)

SERVICE_NAME = "google_maps"


class GoogleMapsClient:
    """Async adapter for the Google Maps web services."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://maps.googleapis.com/maps/api",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Google Maps API key is required")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
        return self._client

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        client = await self._get_client()
        try:
            resp = await client.get(path, params={**params, "key": self._api_key})
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise OracleError(SERVICE_NAME, f"{path} request failed: {exc}") from exc

    async def distance_matrix(
        self,
        origin: LatLng,
        destination: LatLng,
        mode: str,
        departure_time: int | None = None,
        arrival_time: int | None = None,
        traffic_model: TrafficModel | None = None,
    ) -> dict[str, Any]:
        """Raw Distance Matrix response for a single origin/destination pair."""
        params: dict[str, Any] = {
            "origins": str(origin),
            "destinations": str(destination),
            "mode": mode,
        }
        if departure_time is not None:
            params["departure_time"] = str(departure_time)
        if arrival_time is not None:
            params["arrival_time"] = str(arrival_time)
        if traffic_model is not None:
            params["traffic_model"] = traffic_model.value
        return await self._get("/distancematrix/json", params)

    async def time_zone(self, location: LatLng, timestamp: int) -> str | None:
        """IANA time zone id at *location*, or None if Google cannot tell."""
        data = await self._get(
            "/timezone/json",
            {"location": str(location), "timestamp": str(timestamp)},
        )
        if data.get("status") != "OK":
            logger.warning("Time zone lookup for %s returned %s", location, data.get("status"))
            return None
        return data.get("timeZoneId")

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def first_element(data: dict[str, Any]) -> dict[str, Any] | None:
    """The single usable Distance Matrix element, or None."""
    if data.get("status") != "OK":
        return None
    rows = data.get("rows") or []
    if not rows:
        return None
    elements = rows[0].get("elements") or []
    if not elements or elements[0].get("status") != "OK":
        return None
    return elements[0]
