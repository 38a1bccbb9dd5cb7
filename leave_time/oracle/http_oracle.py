"""HttpDurationOracle — the Duration Oracle backed by Google Maps and Open-Meteo.

Mode mapping onto the Distance Matrix API:
    driving, rideshare  → mode=driving with departure_time + traffic_model
    transit             → mode=transit with arrival_time
    walking, bicycling  → mode as-is, no time parameters
"""

from __future__ import annotations

from leave_time.domain.enums import ModeStrategy, TrafficModel, TravelMode
from leave_time.domain.samples import DurationSample, WeatherSignal
from leave_time.domain.trip import LatLng
from leave_time.oracle.base import DurationOracle
from leave_time.oracle.google_maps import GoogleMapsClient, first_element
from leave_time.oracle.open_meteo import OpenMeteoClient


def _value(element: dict, name: str) -> int | None:
    field = element.get(name)
    if not isinstance(field, dict) or field.get("value") is None:
        return None
    return int(field["value"])


def _api_mode(mode: TravelMode) -> str:
    if mode is TravelMode.RIDESHARE:
        return TravelMode.DRIVING.value
    return mode.value


class HttpDurationOracle(DurationOracle):
    """Composes the Maps and weather clients into one oracle capability."""

    def __init__(self, maps: GoogleMapsClient, weather: OpenMeteoClient) -> None:
        self._maps = maps
        self._weather = weather

    async def duration_at_departure(
        self,
        mode: TravelMode,
        origin: LatLng,
        destination: LatLng,
        departure: int | None,
        traffic_model: TrafficModel = TrafficModel.BEST_GUESS,
    ) -> DurationSample:
        if mode.strategy is ModeStrategy.TIME_VARYING:
            data = await self._maps.distance_matrix(
                origin, destination, _api_mode(mode),
                departure_time=departure,
                traffic_model=traffic_model if departure is not None else None,
            )
        else:
            data = await self._maps.distance_matrix(origin, destination, _api_mode(mode))

        element = first_element(data)
        if element is None:
            return DurationSample.failed(f"no {mode.value} route ({data.get('status')})")
        duration = _value(element, "duration_in_traffic")
        if duration is None:
            duration = _value(element, "duration")
        if duration is None:
            return DurationSample.failed(f"{mode.value} element has no duration")
        return DurationSample.of(duration)

    async def plan_arrival_by(
        self,
        mode: TravelMode,
        origin: LatLng,
        destination: LatLng,
        deadline: int,
    ) -> DurationSample:
        data = await self._maps.distance_matrix(
            origin, destination, _api_mode(mode), arrival_time=deadline,
        )
        element = first_element(data)
        if element is None:
            return DurationSample.failed(f"no {mode.value} plan ({data.get('status')})")

        duration = _value(element, "duration")
        departure = _value(element, "departure_time")
        arrival = _value(element, "arrival_time")
        if duration is None or departure is None or arrival is None:
            return DurationSample.failed(f"{mode.value} plan is missing timetable fields")
        return DurationSample.of(duration, departure=departure, arrival=arrival)

    async def weather_signal(
        self,
        latitude: float,
        longitude: float,
        hour: int,
    ) -> WeatherSignal | None:
        return await self._weather.hourly_signal(latitude, longitude, hour)

    async def aclose(self) -> None:
        await self._maps.aclose()
        await self._weather.aclose()
