"""Solver output — one Recommendation per feasible mode, wrapped in advice."""

from __future__ import annotations

from pydantic import BaseModel, Field

from leave_time.domain.enums import TravelMode


class Recommendation(BaseModel):
    """Latest safe departure for a single mode.

    Guarantees ``departure + duration_seconds + buffer_minutes * 60``
    does not exceed the request deadline.
    """

    mode: TravelMode
    departure: int = Field(..., description="Latest safe departure in epoch seconds")
    arrival: int = Field(..., description="Predicted arrival before access buffers")
    duration_seconds: int = Field(..., ge=0)
    travel_minutes: int = Field(..., ge=0, description="Travel duration rounded to minutes")
    buffer_minutes: int = Field(..., ge=0, description="Procedural + weather + access buffer")
    notes: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class DepartureAdvice(BaseModel):
    """Everything the caller needs to render or serialise a solve."""

    deadline: int
    time_zone: str
    procedural_buffer_minutes: int
    weather_buffer_minutes: int
    weather_reasons: list[str] = Field(default_factory=list)
    total_buffer_minutes: int = Field(..., description="Non-travel buffer shared by every mode")
    effective_deadline: int = Field(..., description="Deadline pulled back by the shared buffer")
    recommendations: list[Recommendation] = Field(default_factory=list)

    model_config = {"frozen": True}
