"""REST endpoint for departure advice.

Path: POST /api/leave-time

This wires together:
1. Boundary validation of the request body
2. Time zone resolution (explicit, or looked up at the destination)
3. Local deadline → epoch instant conversion
4. RecommendationAssembler (buffers + per-mode solving)

Returns the DepartureAdvice plus each departure rendered as an ISO
timestamp in the destination's zone.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from leave_time.core.assembler import InvalidTripRequestError, RecommendationAssembler
from leave_time.domain.enums import TrafficModel, TravelMode, TripCategory
from leave_time.domain.recommendation import DepartureAdvice
from leave_time.domain.trip import BufferSpec, LatLng, TripRequest
from leave_time.foundation.clock import now_instant
from leave_time.oracle.base import OracleError

logger = logging.getLogger(__name__)

TimeZoneResolver = Callable[[LatLng, int], Awaitable[Optional[str]]]


class LeaveTimeRequest(BaseModel):
    """Request body for POST /api/leave-time."""

    origin: LatLng
    destination: LatLng
    deadline_local: datetime = Field(
        ..., description="Deadline as wall-clock time at the destination (YYYY-MM-DDTHH:MM)",
    )
    time_zone: Optional[str] = Field(
        default=None, description="IANA zone of the destination; looked up when omitted",
    )
    category: TripCategory
    precheck: bool = False
    checked_bags: bool = False
    modes: list[TravelMode] = Field(default_factory=lambda: [TravelMode.DRIVING])
    pickup_buffer_minutes: Optional[int] = None
    parking_buffer_minutes: Optional[int] = None
    extra_buffer_minutes: int = 0
    traffic_model: Optional[TrafficModel] = Field(
        default=None, description="Traffic assumption for driving and rideshare; server default when omitted",
    )


def _local_iso(instant: int, zone: ZoneInfo) -> str:
    return datetime.fromtimestamp(instant, tz=timezone.utc).astimezone(zone).isoformat()


def _serialise(advice: DepartureAdvice, zone: ZoneInfo) -> dict[str, Any]:
    body = advice.model_dump(mode="json")
    body["effective_deadline_local"] = _local_iso(advice.effective_deadline, zone)
    for rec, out in zip(advice.recommendations, body["recommendations"]):
        out["leave_time_local"] = _local_iso(rec.departure, zone)
    return {"ok": True, **body}


def create_leave_time_router(
    assembler: RecommendationAssembler | None,
    time_zone_resolver: TimeZoneResolver | None = None,
    default_traffic_model: TrafficModel = TrafficModel.BEST_GUESS,
) -> APIRouter:
    """Factory that wires the leave-time endpoint to an assembler.

    Args:
        assembler: The configured RecommendationAssembler, or None when the
                   oracle could not be built (e.g. missing API key).
        time_zone_resolver: Optional async lookup used when the request
                            omits ``time_zone``.
        default_traffic_model: Traffic model used when the request omits
                               ``traffic_model``.
    """

    router = APIRouter(prefix="/api", tags=["leave-time"])

    @router.post("/leave-time")
    async def leave_time(body: LeaveTimeRequest) -> dict[str, Any]:
        if assembler is None:
            raise HTTPException(status_code=503, detail="Travel-time oracle is not configured")

        # ── Resolve time zone ─────────────────────────────────────
        tz_id = body.time_zone
        if tz_id is None:
            if time_zone_resolver is None:
                raise HTTPException(status_code=400, detail="time_zone is required")
            try:
                tz_id = await time_zone_resolver(body.destination, now_instant())
            except OracleError as exc:
                logger.warning("Time zone lookup failed: %s", exc)
                tz_id = None
            if not tz_id:
                raise HTTPException(status_code=400, detail="Could not determine destination time zone")
        try:
            zone = ZoneInfo(tz_id)
        except (ZoneInfoNotFoundError, ValueError):
            raise HTTPException(status_code=400, detail=f"Unknown time zone: {tz_id}") from None

        # ── Local wall clock → instant ────────────────────────────
        local = body.deadline_local
        local = local.replace(tzinfo=zone) if local.tzinfo is None else local.astimezone(zone)
        deadline = int(local.timestamp())

        # ── Solve ─────────────────────────────────────────────────
        try:
            request = TripRequest(
                origin=body.origin,
                destination=body.destination,
                deadline=deadline,
                modes=body.modes,
                buffer=BufferSpec(
                    category=body.category,
                    precheck=body.precheck,
                    bags=body.checked_bags,
                    pickup_minutes=body.pickup_buffer_minutes,
                    parking_minutes=body.parking_buffer_minutes,
                    extra_minutes=body.extra_buffer_minutes,
                ),
                time_zone=tz_id,
                traffic_model=body.traffic_model or default_traffic_model,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

        try:
            advice = await assembler.assemble(request)
        except InvalidTripRequestError as exc:
            raise HTTPException(status_code=400, detail=exc.reason)

        return _serialise(advice, zone)

    return router
