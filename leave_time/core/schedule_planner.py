"""Schedule planner — latest departure for fixed-schedule modes.

Timetabled trips are not a continuous function of departure time, so
there is nothing to search.  The oracle is asked once for its best plan
arriving by the deadline and its answer is trusted, provided it is
complete and actually meets the deadline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from leave_time.domain.enums import TravelMode
from leave_time.domain.trip import LatLng
from leave_time.oracle.base import DurationOracle, OracleError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitPlan:
    departure: int
    arrival: int
    duration_seconds: int


async def plan_for_arrival(
    mode: TravelMode,
    origin: LatLng,
    destination: LatLng,
    deadline: int,
    oracle: DurationOracle,
) -> TransitPlan | None:
    """Return the oracle's plan arriving by *deadline*, or None if infeasible."""
    try:
        sample = await oracle.plan_arrival_by(mode, origin, destination, deadline)
    except OracleError as exc:
        logger.warning("Plan for %s failed: %s", mode.value, exc)
        return None

    if not sample.ok:
        logger.warning("No %s plan: %s", mode.value, sample.reason or "no data")
        return None
    if sample.departure is None or sample.arrival is None or sample.duration_seconds is None:
        logger.warning("Incomplete %s plan: %s", mode.value, sample.model_dump())
        return None
    if sample.arrival > deadline or sample.departure + sample.duration_seconds > deadline:
        logger.info("%s plan arrives after deadline %d", mode.value, deadline)
        return None

    return TransitPlan(
        departure=sample.departure,
        arrival=sample.arrival,
        duration_seconds=sample.duration_seconds,
    )
