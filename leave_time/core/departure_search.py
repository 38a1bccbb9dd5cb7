"""Departure search — latest departure for time-varying modes.

Algorithm:
    Binary search over candidate departures in [earliest, deadline].

        probe = (lo + hi) // 2
        arrival = probe + duration(probe)
        arrival <= deadline  →  best = probe, lo = probe + step
        otherwise            →  hi = probe - step

    The bounds move by a whole step (60 s by default) rather than by one
    second, and the loop stops after ``max_probes`` oracle calls.  The
    oracle is a rate-limited service, so the number of calls per search
    is fixed in advance; precision is whatever that budget buys.

    Probes are strictly sequential: each bound update depends on the
    previous answer.  A single oracle failure ends the search and the
    mode is reported infeasible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from leave_time.domain.enums import TrafficModel, TravelMode
from leave_time.domain.trip import LatLng
from leave_time.oracle.base import DurationOracle, OracleError

logger = logging.getLogger(__name__)

DEFAULT_MAX_PROBES = 8
DEFAULT_STEP_SECONDS = 60


@dataclass(frozen=True)
class SearchResult:
    """A feasible departure and the duration the oracle predicted for it."""

    departure: int
    duration_seconds: int

    @property
    def arrival(self) -> int:
        return self.departure + self.duration_seconds


async def _probe(
    oracle: DurationOracle,
    mode: TravelMode,
    origin: LatLng,
    destination: LatLng,
    departure: int,
    traffic_model: TrafficModel,
) -> int | None:
    """Ask the oracle once; None means the search must stop."""
    try:
        sample = await oracle.duration_at_departure(
            mode, origin, destination, departure, traffic_model,
        )
    except OracleError as exc:
        logger.warning("Probe for %s at %d failed: %s", mode.value, departure, exc)
        return None
    if not sample.ok or sample.duration_seconds is None:
        logger.warning(
            "Probe for %s at %d returned no data: %s",
            mode.value, departure, sample.reason or "no duration",
        )
        return None
    return sample.duration_seconds


async def latest_departure(
    mode: TravelMode,
    origin: LatLng,
    destination: LatLng,
    earliest: int,
    deadline: int,
    oracle: DurationOracle,
    *,
    traffic_model: TrafficModel = TrafficModel.BEST_GUESS,
    max_probes: int = DEFAULT_MAX_PROBES,
    step_seconds: int = DEFAULT_STEP_SECONDS,
    revalidate: bool = False,
) -> SearchResult | None:
    """Find the latest departure in [earliest, deadline] that arrives by *deadline*.

    Args:
        mode: A time-varying travel mode.
        earliest: Earliest instant the traveler could leave.
        deadline: Latest acceptable arrival (access buffers already removed).
        oracle: Source of durations.
        max_probes: Upper bound on oracle calls during the search.
        step_seconds: How far a bound moves past a probe.
        revalidate: Spend one more oracle call confirming the chosen departure.

    Returns:
        The latest feasible SearchResult visited, or None if infeasible.
    """
    if max_probes < 1:
        raise ValueError(f"max_probes must be positive, got {max_probes}")
    if step_seconds < 1:
        raise ValueError(f"step_seconds must be positive, got {step_seconds}")

    lo, hi = earliest, deadline
    best: SearchResult | None = None

    for _ in range(max_probes):
        if lo > hi:
            break
        probe = (lo + hi) // 2
        duration = await _probe(oracle, mode, origin, destination, probe, traffic_model)
        if duration is None:
            return None

        if probe + duration <= deadline:
            # lo only rises past a feasible probe, so this one is the latest yet
            best = SearchResult(departure=probe, duration_seconds=duration)
            lo = probe + step_seconds
        else:
            hi = probe - step_seconds

    if best is None:
        logger.info("No feasible %s departure in [%d, %d]", mode.value, earliest, deadline)
        return None

    if revalidate:
        duration = await _probe(oracle, mode, origin, destination, best.departure, traffic_model)
        if duration is None or best.departure + duration > deadline:
            logger.info("Re-validation rejected %s departure %d", mode.value, best.departure)
            return None
        best = SearchResult(departure=best.departure, duration_seconds=duration)

    logger.debug(
        "Latest %s departure %d (duration %ds, deadline %d)",
        mode.value, best.departure, best.duration_seconds, deadline,
    )
    return best
