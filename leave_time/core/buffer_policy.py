"""Buffer policy — pure rules turning trip facts into minutes.

Three independent buffers are composed by the assembler:

    procedural = max(base + security - precheck + bags + extra, floor)
    access     = pickup (rideshare) | parking (driving) | 0
    weather    = 10 per active risk flag

    | category      | base | security |
    |---------------|------|----------|
    | domestic      | 120  | 45       |
    | international | 180  | 60       |

No I/O, no clock, no configuration lookups: defaults arrive as arguments.
"""

from __future__ import annotations

from leave_time.domain.enums import TravelMode, TripCategory
from leave_time.domain.samples import WeatherBuffer, WeatherSignal

_BASE_MINUTES: dict[TripCategory, int] = {
    TripCategory.DOMESTIC: 120,
    TripCategory.INTERNATIONAL: 180,
}

_SECURITY_MINUTES: dict[TripCategory, int] = {
    TripCategory.DOMESTIC: 45,
    TripCategory.INTERNATIONAL: 60,
}

PRECHECK_DISCOUNT_MINUTES = 20
BAG_DROP_MINUTES = 20
PROCEDURAL_FLOOR_MINUTES = 30
DEFAULT_PICKUP_MINUTES = 8
DEFAULT_PARKING_MINUTES = 12
WEATHER_ADDEND_MINUTES = 10

PRECIPITATION_REASON = "precipitation expected"
HIGH_WIND_REASON = "high wind gusts"


def procedural_buffer(
    category: TripCategory,
    precheck: bool,
    bags: bool,
    extra_minutes: int = 0,
    *,
    floor: int = PROCEDURAL_FLOOR_MINUTES,
) -> int:
    """Minutes of security/check-in overhead before the deadline."""
    total = _BASE_MINUTES[category] + _SECURITY_MINUTES[category]
    if precheck:
        total -= PRECHECK_DISCOUNT_MINUTES
    if bags:
        total += BAG_DROP_MINUTES
    total += extra_minutes
    return max(total, floor, 0)


def access_buffer(
    mode: TravelMode,
    pickup_minutes: int | None = None,
    parking_minutes: int | None = None,
    *,
    default_pickup: int = DEFAULT_PICKUP_MINUTES,
    default_parking: int = DEFAULT_PARKING_MINUTES,
) -> int:
    """Minutes spent getting into or out of the vehicle for *mode*."""
    if mode is TravelMode.RIDESHARE:
        return max(default_pickup if pickup_minutes is None else pickup_minutes, 0)
    if mode is TravelMode.DRIVING:
        return max(default_parking if parking_minutes is None else parking_minutes, 0)
    return 0


def weather_buffer(
    signal: WeatherSignal | None,
    *,
    addend: int = WEATHER_ADDEND_MINUTES,
) -> WeatherBuffer:
    """Translate weather risk flags into minutes with human-readable reasons."""
    if signal is None:
        return WeatherBuffer()

    minutes = 0
    reasons: list[str] = []
    if signal.precipitation_likely:
        minutes += addend
        reasons.append(PRECIPITATION_REASON)
    if signal.high_wind:
        minutes += addend
        reasons.append(HIGH_WIND_REASON)
    return WeatherBuffer(minutes=minutes, reasons=reasons)


def access_note(mode: TravelMode, minutes: int) -> str | None:
    """Advisory note describing the access buffer folded into *mode*."""
    if mode is TravelMode.DRIVING:
        return f"Includes parking buffer of {minutes} min"
    if mode is TravelMode.RIDESHARE:
        return f"Includes pickup buffer of {minutes} min"
    return None
