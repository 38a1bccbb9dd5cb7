from leave_time.domain.enums import ModeStrategy, TrafficModel, TravelMode, TripCategory
from leave_time.domain.recommendation import DepartureAdvice, Recommendation
from leave_time.domain.samples import DurationSample, WeatherBuffer, WeatherSignal
from leave_time.domain.trip import BufferSpec, LatLng, TripRequest

__all__ = [
    "BufferSpec",
    "DepartureAdvice",
    "DurationSample",
    "LatLng",
    "ModeStrategy",
    "Recommendation",
    "TrafficModel",
    "TravelMode",
    "TripCategory",
    "TripRequest",
    "WeatherBuffer",
    "WeatherSignal",
]
