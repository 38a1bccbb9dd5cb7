"""Open-Meteo client — hourly forecast reduced to weather risk flags.

Expected response shape (trimmed):
{
    "hourly": {
        "time": ["2026-03-01T14:00", ...],
        "precipitation_probability": [70, ...],
        "precipitation": [1.2, ...],
        "windgusts_10m": [42.0, ...]
    }
}
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from leave_time.domain.samples import WeatherSignal
from leave_time.oracle.base import OracleError

logger = logging.getLogger(__name__)

SERVICE_NAME = "open_meteo"

_HOURLY_FIELDS = "precipitation_probability,precipitation,weathercode,windspeed_10m,windgusts_10m"


def _hour_key(hour: int) -> str:
    return datetime.fromtimestamp(hour, tz=timezone.utc).strftime("%Y-%m-%dT%H:00")


def _value_at(hourly: dict[str, Any], name: str, idx: int) -> float:
    series = hourly.get(name) or []
    if idx >= len(series) or series[idx] is None:
        return 0.0
    return float(series[idx])


class OpenMeteoClient:
    """Async adapter for the Open-Meteo forecast API."""

    def __init__(
        self,
        base_url: str = "https://api.open-meteo.com/v1",
        timeout: float = 15.0,
        precipitation_probability_threshold: float = 60.0,
        precipitation_mm_threshold: float = 1.0,
        wind_gust_kmh_threshold: float = 40.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._precip_prob = precipitation_probability_threshold
        self._precip_mm = precipitation_mm_threshold
        self._gust = wind_gust_kmh_threshold
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
        return self._client

    async def hourly_signal(self, latitude: float, longitude: float, hour: int) -> WeatherSignal | None:
        """Risk flags for the UTC hour starting at *hour*, or None if not forecast."""
        client = await self._get_client()
        try:
            resp = await client.get("/forecast", params={
                "latitude": str(latitude),
                "longitude": str(longitude),
                "hourly": _HOURLY_FIELDS,
                "timezone": "UTC",
            })
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise OracleError(SERVICE_NAME, f"forecast request failed: {exc}") from exc

        hourly = data.get("hourly") or {}
        times: list[str] = hourly.get("time") or []
        key = _hour_key(hour)
        if key not in times:
            logger.info("No forecast for %s at (%s, %s)", key, latitude, longitude)
            return None
        idx = times.index(key)

        precip_prob = _value_at(hourly, "precipitation_probability", idx)
        precip = _value_at(hourly, "precipitation", idx)
        gust = _value_at(hourly, "windgusts_10m", idx)

        return WeatherSignal(
            precipitation_likely=precip_prob >= self._precip_prob or precip >= self._precip_mm,
            high_wind=gust >= self._gust,
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
