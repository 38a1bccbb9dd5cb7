"""RecommendationAssembler — one comparable recommendation per travel mode.

Design principles:
    1. Stateless: accepts a TripRequest, returns a DepartureAdvice.
    2. The oracle is injected; the assembler never builds HTTP clients.
    3. Configuration arrives as an explicit PlannerConfig, never from
       process-wide settings.
    4. A failing or infeasible mode is dropped, never fatal.

Deadline arithmetic (all instants in epoch seconds):

    shared          = procedural + weather                  (minutes)
    effective       = deadline - shared * 60
    mode_deadline   = effective - access(mode) * 60

    time_varying    → departure search in [earliest, mode_deadline]
    fixed_schedule  → oracle plan arriving by mode_deadline
    constant_speed  → mode_deadline - duration

Results are ordered latest departure first.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ValidationError

from leave_time.core.buffer_policy import (
    access_buffer,
    access_note,
    procedural_buffer,
    weather_buffer,
)
from leave_time.core.departure_search import latest_departure
from leave_time.core.schedule_planner import plan_for_arrival
from leave_time.domain.enums import ModeStrategy, TravelMode
from leave_time.domain.recommendation import DepartureAdvice, Recommendation
from leave_time.domain.samples import WeatherSignal
from leave_time.domain.trip import TripRequest
from leave_time.foundation.clock import hour_floor, now_instant
from leave_time.oracle.base import DurationOracle, OracleError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannerConfig:
    """Tunable constants for buffers and the departure search."""

    procedural_floor_minutes: int = 30
    default_pickup_minutes: int = 8
    default_parking_minutes: int = 12
    weather_addend_minutes: int = 10

    # Search budget: oracle calls per time-varying mode, and bound step
    max_probes: int = 8
    step_seconds: int = 60
    revalidate: bool = False


class InvalidTripRequestError(Exception):
    """Raised when a request cannot be solved at all (bad or missing inputs)."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class RecommendationAssembler:
    """Turns a trip request into ordered per-mode departure recommendations.

    Usage:
        assembler = RecommendationAssembler(oracle, PlannerConfig())
        advice = await assembler.assemble(request)
    """

    def __init__(
        self,
        oracle: DurationOracle,
        config: PlannerConfig | None = None,
        clock: Callable[[], int] = now_instant,
    ) -> None:
        self._oracle = oracle
        self._config = config or PlannerConfig()
        self._clock = clock

    # ── Public API ───────────────────────────────────────────────────────

    async def assemble(
        self,
        request: TripRequest | dict[str, Any],
        *,
        earliest: int | None = None,
        weather: WeatherSignal | None = None,
        fetch_weather: bool = True,
    ) -> DepartureAdvice:
        """Compute the latest safe departure for every requested mode.

        Args:
            request: A TripRequest, or a raw dict validated into one.
            earliest: Earliest possible departure; defaults to now.
            weather: Pre-fetched weather signal.  When absent and
                     *fetch_weather* is set, the oracle is asked for the
                     origin's weather at the deadline hour.

        Raises:
            InvalidTripRequestError: If the request is malformed or names no modes.
        """
        request = self._validate(request)
        cfg = self._config
        start = self._clock() if earliest is None else earliest

        procedural = procedural_buffer(
            request.buffer.category,
            request.buffer.precheck,
            request.buffer.bags,
            request.buffer.extra_minutes,
            floor=cfg.procedural_floor_minutes,
        )

        if weather is None and fetch_weather:
            weather = await self._fetch_weather(request)
        weather_buf = weather_buffer(weather, addend=cfg.weather_addend_minutes)

        shared = procedural + weather_buf.minutes
        effective_deadline = request.deadline - shared * 60

        results = await asyncio.gather(*(
            self._evaluate(mode, request, effective_deadline, shared, start)
            for mode in request.modes
        ))
        recommendations = sorted(
            (r for r in results if r is not None),
            key=lambda r: r.departure,
            reverse=True,
        )

        logger.info(
            "Assembled %d/%d recommendations (buffer=%d min, effective deadline=%d)",
            len(recommendations), len(request.modes), shared, effective_deadline,
        )

        return DepartureAdvice(
            deadline=request.deadline,
            time_zone=request.time_zone,
            procedural_buffer_minutes=procedural,
            weather_buffer_minutes=weather_buf.minutes,
            weather_reasons=weather_buf.reasons,
            total_buffer_minutes=shared,
            effective_deadline=effective_deadline,
            recommendations=recommendations,
        )

    # ── Internals ────────────────────────────────────────────────────────

    @staticmethod
    def _validate(request: TripRequest | dict[str, Any]) -> TripRequest:
        if isinstance(request, dict):
            try:
                request = TripRequest.model_validate(request)
            except ValidationError as exc:
                raise InvalidTripRequestError(str(exc)) from exc
        if not request.modes:
            raise InvalidTripRequestError("at least one travel mode is required")
        return request

    async def _fetch_weather(self, request: TripRequest) -> WeatherSignal | None:
        hour = hour_floor(request.deadline)
        try:
            return await self._oracle.weather_signal(request.origin.lat, request.origin.lng, hour)
        except OracleError as exc:
            logger.warning("Weather unavailable, no weather buffer applied: %s", exc)
            return None

    async def _evaluate(
        self,
        mode: TravelMode,
        request: TripRequest,
        effective_deadline: int,
        shared_minutes: int,
        earliest: int,
    ) -> Recommendation | None:
        cfg = self._config
        access = access_buffer(
            mode,
            request.buffer.pickup_minutes,
            request.buffer.parking_minutes,
            default_pickup=cfg.default_pickup_minutes,
            default_parking=cfg.default_parking_minutes,
        )
        mode_deadline = effective_deadline - access * 60

        timing = await self._solve(mode, request, earliest, mode_deadline)
        if timing is None:
            logger.info("Mode %s omitted: infeasible or no oracle data", mode.value)
            return None
        departure, arrival, duration = timing

        note = access_note(mode, access)
        return Recommendation(
            mode=mode,
            departure=departure,
            arrival=arrival,
            duration_seconds=duration,
            travel_minutes=(duration + 30) // 60,
            buffer_minutes=shared_minutes + access,
            notes=[note] if note else [],
        )

    async def _solve(
        self,
        mode: TravelMode,
        request: TripRequest,
        earliest: int,
        mode_deadline: int,
    ) -> tuple[int, int, int] | None:
        """Dispatch on the mode's strategy → (departure, arrival, duration)."""
        cfg = self._config
        strategy = mode.strategy

        if strategy is ModeStrategy.TIME_VARYING:
            found = await latest_departure(
                mode,
                request.origin,
                request.destination,
                earliest,
                mode_deadline,
                self._oracle,
                traffic_model=request.traffic_model,
                max_probes=cfg.max_probes,
                step_seconds=cfg.step_seconds,
                revalidate=cfg.revalidate,
            )
            if found is None:
                return None
            return found.departure, found.arrival, found.duration_seconds

        if strategy is ModeStrategy.FIXED_SCHEDULE:
            plan = await plan_for_arrival(
                mode, request.origin, request.destination, mode_deadline, self._oracle,
            )
            if plan is None or plan.departure < earliest:
                return None
            return plan.departure, plan.arrival, plan.duration_seconds

        # Constant speed: duration does not depend on departure time
        try:
            sample = await self._oracle.duration_at_departure(
                mode, request.origin, request.destination, None, request.traffic_model,
            )
        except OracleError as exc:
            logger.warning("Duration for %s failed: %s", mode.value, exc)
            return None
        if not sample.ok or sample.duration_seconds is None:
            logger.warning("No %s duration: %s", mode.value, sample.reason or "no data")
            return None

        departure = mode_deadline - sample.duration_seconds
        if departure < earliest:
            return None
        return departure, mode_deadline, sample.duration_seconds
