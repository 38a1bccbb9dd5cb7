"""Abstract base for the Duration Oracle.

The oracle is the solver's only window onto the outside world: travel
durations, timetable-aligned plans and weather risk.  Concrete adapters
wrap HTTP services; tests use deterministic fakes.

Architectural rules:
    1. An oracle call answers exactly one question; it never retries.
    2. "No route" / "no data" is reported as a failed DurationSample.
    3. Transport problems are raised as OracleError.
    4. No buffer or feasibility logic lives inside an oracle.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from leave_time.domain.enums import TrafficModel, TravelMode
from leave_time.domain.samples import DurationSample, WeatherSignal
from leave_time.domain.trip import LatLng


class OracleError(Exception):
    """Raised when an oracle cannot reach or understand its upstream service."""

    def __init__(self, service: str, reason: str) -> None:
        self.service = service
        self.reason = reason
        super().__init__(f"{service}: {reason}")


class DurationOracle(ABC):
    """Capability providing travel-time predictions and weather signals."""

    @abstractmethod
    async def duration_at_departure(
        self,
        mode: TravelMode,
        origin: LatLng,
        destination: LatLng,
        departure: int | None,
        traffic_model: TrafficModel = TrafficModel.BEST_GUESS,
    ) -> DurationSample:
        """Travel duration when leaving at *departure*.

        ``departure=None`` asks for the time-invariant duration used by
        constant-speed modes.

        Raises:
            OracleError: If the upstream service could not be queried.
        """
        ...

    @abstractmethod
    async def plan_arrival_by(
        self,
        mode: TravelMode,
        origin: LatLng,
        destination: LatLng,
        deadline: int,
    ) -> DurationSample:
        """Best timetable plan arriving no later than *deadline*.

        A usable sample carries ``departure``, ``arrival`` and
        ``duration_seconds``.

        Raises:
            OracleError: If the upstream service could not be queried.
        """
        ...

    @abstractmethod
    async def weather_signal(
        self,
        latitude: float,
        longitude: float,
        hour: int,
    ) -> WeatherSignal | None:
        """Weather risk flags for the UTC hour starting at *hour*, or None if unavailable.

        Raises:
            OracleError: If the upstream service could not be queried.
        """
        ...
