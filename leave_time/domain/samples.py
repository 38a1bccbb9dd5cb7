"""Oracle observations — durations and weather as reported by collaborators.

These are pure data structures.  A DurationSample is what the Duration
Oracle said about one query; it carries no opinion on feasibility.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class DurationSample(BaseModel):
    """Result of one Duration Oracle query.

    ``departure`` and ``arrival`` are only populated for fixed-schedule
    modes, where the timetable decides when the trip actually starts.
    """

    ok: bool
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    departure: Optional[int] = None
    arrival: Optional[int] = None
    reason: Optional[str] = Field(default=None, description="Why the query produced no usable data")

    model_config = {"frozen": True}

    @classmethod
    def of(
        cls,
        duration_seconds: int,
        departure: int | None = None,
        arrival: int | None = None,
    ) -> DurationSample:
        return cls(ok=True, duration_seconds=duration_seconds, departure=departure, arrival=arrival)

    @classmethod
    def failed(cls, reason: str) -> DurationSample:
        return cls(ok=False, reason=reason)


class WeatherSignal(BaseModel):
    """Categorical weather risk flags for one place and hour."""

    precipitation_likely: bool = False
    high_wind: bool = False

    model_config = {"frozen": True}


class WeatherBuffer(BaseModel):
    """Minutes added for weather risk, with one reason per contributing flag."""

    minutes: int = Field(default=0, ge=0)
    reasons: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}
