"""Trip inputs — what the caller has already resolved before solving.

Coordinates, the target time zone and the deadline instant arrive here
fully resolved.  Nothing in this module performs I/O.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from leave_time.domain.enums import TrafficModel, TravelMode, TripCategory


# ── Coordinates ──────────────────────────────────────────────────────────────

class LatLng(BaseModel):
    """A resolved WGS84 coordinate pair."""

    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.lat},{self.lng}"


# ── Buffer Spec ──────────────────────────────────────────────────────────────

class BufferSpec(BaseModel):
    """Everything the buffer policy needs besides the weather signal."""

    category: TripCategory
    precheck: bool = False
    bags: bool = False
    pickup_minutes: Optional[int] = Field(
        default=None,
        description="Rideshare pickup allowance; falls back to the configured default",
    )
    parking_minutes: Optional[int] = Field(
        default=None,
        description="Self-driven parking allowance; falls back to the configured default",
    )
    extra_minutes: int = Field(default=0, description="Operator-supplied extra minutes")

    model_config = {"frozen": True}


# ── Trip Request ─────────────────────────────────────────────────────────────

class TripRequest(BaseModel):
    """One solve: where from, where to, by when, and by which modes.

    Immutable after creation.  Validated at the boundary so the solver
    never has to re-check field constraints.
    """

    origin: LatLng
    destination: LatLng
    deadline: int = Field(..., gt=0, description="Arrival deadline in epoch seconds")
    modes: list[TravelMode] = Field(..., min_length=1)
    buffer: BufferSpec
    time_zone: str = Field(default="UTC", min_length=1, description="IANA zone of the destination")
    traffic_model: TrafficModel = TrafficModel.BEST_GUESS

    model_config = {"frozen": True}

    @field_validator("modes")
    @classmethod
    def modes_must_be_unique(cls, v: list[TravelMode]) -> list[TravelMode]:
        # Keep first occurrence order; a mode never yields two rows
        return list(dict.fromkeys(v))
