"""Controlled enumerations for the leave-time domain.

Every categorical field in the domain MUST reference an enum defined here.
Free-form strings are not acceptable for classification fields.
"""

from __future__ import annotations

from enum import Enum


class ModeStrategy(str, Enum):
    """How the travel duration of a mode is modelled."""

    CONSTANT_SPEED = "constant_speed"
    TIME_VARYING = "time_varying"
    FIXED_SCHEDULE = "fixed_schedule"


class TravelMode(str, Enum):
    """Travel modes a traveler may choose between."""

    DRIVING = "driving"
    RIDESHARE = "rideshare"
    TRANSIT = "transit"
    WALKING = "walking"
    BICYCLING = "bicycling"

    @property
    def strategy(self) -> ModeStrategy:
        return _STRATEGIES[self]


_STRATEGIES: dict[TravelMode, ModeStrategy] = {
    TravelMode.DRIVING: ModeStrategy.TIME_VARYING,
    TravelMode.RIDESHARE: ModeStrategy.TIME_VARYING,
    TravelMode.TRANSIT: ModeStrategy.FIXED_SCHEDULE,
    TravelMode.WALKING: ModeStrategy.CONSTANT_SPEED,
    TravelMode.BICYCLING: ModeStrategy.CONSTANT_SPEED,
}


class TripCategory(str, Enum):
    """Category of the trip at the destination (drives procedural buffers)."""

    DOMESTIC = "domestic"
    INTERNATIONAL = "international"


class TrafficModel(str, Enum):
    """Traffic assumption forwarded to the oracle for time-varying probes."""

    BEST_GUESS = "best_guess"
    PESSIMISTIC = "pessimistic"
    OPTIMISTIC = "optimistic"
