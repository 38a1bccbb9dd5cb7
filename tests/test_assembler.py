"""Tests for the RecommendationAssembler.

Buffer arithmetic used throughout (domestic, precheck, no bags):
    procedural = 120 + 45 - 20 = 145 min
"""

from __future__ import annotations

import pytest

from leave_time.core.assembler import (
    InvalidTripRequestError,
    PlannerConfig,
    RecommendationAssembler,
)
from leave_time.domain.enums import TravelMode, TripCategory
from leave_time.domain.recommendation import DepartureAdvice
from leave_time.domain.samples import DurationSample, WeatherSignal
from leave_time.domain.trip import BufferSpec, TripRequest

from tests.fakes import AIRPORT, DEADLINE, ORIGIN, FakeOracle, constant, failing

PROCEDURAL = 145
EARLIEST = DEADLINE - 6 * 3600


def _request(modes: list[TravelMode], **buffer_overrides) -> TripRequest:
    buffer = {"category": TripCategory.DOMESTIC, "precheck": True, "bags": False}
    buffer.update(buffer_overrides)
    return TripRequest(
        origin=ORIGIN,
        destination=AIRPORT,
        deadline=DEADLINE,
        modes=modes,
        buffer=BufferSpec(**buffer),
        time_zone="America/New_York",
    )


def _transit_plan(deadline: int) -> DurationSample:
    return DurationSample.of(2700, departure=deadline - 3000, arrival=deadline - 300)


def _assert_not_later_than(advice: DepartureAdvice) -> None:
    for rec in advice.recommendations:
        assert rec.departure + rec.duration_seconds + rec.buffer_minutes * 60 <= advice.deadline


class TestConstantSpeed:
    @pytest.mark.asyncio
    async def test_exact_departure_without_search(self) -> None:
        oracle = FakeOracle(durations={TravelMode.WALKING: constant(1800)})
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.WALKING]), earliest=EARLIEST,
        )
        [rec] = advice.recommendations
        assert rec.departure == DEADLINE - PROCEDURAL * 60 - 1800
        assert rec.arrival == DEADLINE - PROCEDURAL * 60
        assert rec.travel_minutes == 30
        assert rec.buffer_minutes == PROCEDURAL
        assert rec.notes == []
        assert oracle.probes_for(TravelMode.WALKING) == [None]

    @pytest.mark.asyncio
    async def test_departure_before_earliest_omitted(self) -> None:
        oracle = FakeOracle(durations={TravelMode.BICYCLING: constant(8 * 3600)})
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.BICYCLING]), earliest=EARLIEST,
        )
        assert advice.recommendations == []


class TestTimeVarying:
    @pytest.mark.asyncio
    async def test_driving_includes_parking_buffer(self) -> None:
        oracle = FakeOracle(durations={TravelMode.DRIVING: constant(3600)})
        mode_deadline = DEADLINE - (PROCEDURAL + 12) * 60
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.DRIVING]), earliest=mode_deadline - 7200,
        )
        [rec] = advice.recommendations
        assert abs(rec.departure - (mode_deadline - 3600)) <= 60
        assert rec.buffer_minutes == PROCEDURAL + 12
        assert rec.notes == ["Includes parking buffer of 12 min"]
        _assert_not_later_than(advice)

    @pytest.mark.asyncio
    async def test_rideshare_uses_configured_pickup(self) -> None:
        oracle = FakeOracle(durations={TravelMode.RIDESHARE: constant(1500)})
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.RIDESHARE], pickup_minutes=5), earliest=EARLIEST,
        )
        [rec] = advice.recommendations
        assert rec.buffer_minutes == PROCEDURAL + 5
        assert rec.notes == ["Includes pickup buffer of 5 min"]
        _assert_not_later_than(advice)

    @pytest.mark.asyncio
    async def test_probe_budget_from_config(self) -> None:
        oracle = FakeOracle(durations={TravelMode.DRIVING: constant(3600)})
        assembler = RecommendationAssembler(oracle, PlannerConfig(max_probes=4))
        await assembler.assemble(_request([TravelMode.DRIVING]), earliest=DEADLINE - 86400)
        assert len(oracle.probes_for(TravelMode.DRIVING)) <= 4

    @pytest.mark.asyncio
    async def test_earliest_defaults_to_clock(self) -> None:
        oracle = FakeOracle(durations={TravelMode.DRIVING: constant(3600)})
        now = DEADLINE - 4 * 3600
        assembler = RecommendationAssembler(oracle, clock=lambda: now)
        await assembler.assemble(_request([TravelMode.DRIVING]))
        probes = oracle.probes_for(TravelMode.DRIVING)
        assert probes
        assert all(p is not None and p >= now for p in probes)


class TestFailureIsolation:
    @pytest.mark.asyncio
    async def test_failing_mode_dropped_others_kept(self) -> None:
        oracle = FakeOracle(durations={
            TravelMode.DRIVING: failing(),
            TravelMode.WALKING: constant(1800),
        })
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.DRIVING, TravelMode.WALKING]), earliest=EARLIEST,
        )
        assert [r.mode for r in advice.recommendations] == [TravelMode.WALKING]
        assert len(oracle.probes_for(TravelMode.DRIVING)) == 1

    @pytest.mark.asyncio
    async def test_oracle_error_dropped(self) -> None:
        oracle = FakeOracle(
            durations={TravelMode.BICYCLING: constant(900)},
            plans={TravelMode.TRANSIT: _transit_plan},
            raise_for={TravelMode.TRANSIT},
        )
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.TRANSIT, TravelMode.BICYCLING]), earliest=EARLIEST,
        )
        assert [r.mode for r in advice.recommendations] == [TravelMode.BICYCLING]

    @pytest.mark.asyncio
    async def test_everything_infeasible_is_not_an_error(self) -> None:
        oracle = FakeOracle()
        advice = await RecommendationAssembler(oracle).assemble(
            _request(list(TravelMode)), earliest=EARLIEST,
        )
        assert advice.recommendations == []
        assert advice.total_buffer_minutes == PROCEDURAL


class TestOrdering:
    @pytest.mark.asyncio
    async def test_latest_departure_first(self) -> None:
        oracle = FakeOracle(
            durations={
                TravelMode.DRIVING: constant(3600),
                TravelMode.WALKING: constant(1800),
                TravelMode.BICYCLING: constant(900),
            },
            plans={TravelMode.TRANSIT: _transit_plan},
        )
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.DRIVING, TravelMode.TRANSIT, TravelMode.WALKING, TravelMode.BICYCLING]),
            earliest=EARLIEST,
        )
        departures = [r.departure for r in advice.recommendations]
        assert departures == sorted(departures, reverse=True)
        assert [r.mode for r in advice.recommendations] == [
            TravelMode.BICYCLING,
            TravelMode.WALKING,
            TravelMode.TRANSIT,
            TravelMode.DRIVING,
        ]
        _assert_not_later_than(advice)

    @pytest.mark.asyncio
    async def test_transit_uses_aligned_times(self) -> None:
        oracle = FakeOracle(plans={TravelMode.TRANSIT: _transit_plan})
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.TRANSIT]), earliest=EARLIEST,
        )
        [rec] = advice.recommendations
        effective = DEADLINE - PROCEDURAL * 60
        assert oracle.plan_calls == [(TravelMode.TRANSIT, effective)]
        assert rec.departure == effective - 3000
        assert rec.arrival == effective - 300
        assert rec.travel_minutes == 45

    @pytest.mark.asyncio
    async def test_transit_before_earliest_omitted(self) -> None:
        oracle = FakeOracle(plans={TravelMode.TRANSIT: _transit_plan})
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.TRANSIT]), earliest=DEADLINE - PROCEDURAL * 60 - 60,
        )
        assert advice.recommendations == []

    @pytest.mark.asyncio
    async def test_duplicate_modes_yield_one_row(self) -> None:
        oracle = FakeOracle(durations={TravelMode.WALKING: constant(1800)})
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.WALKING, TravelMode.WALKING]), earliest=EARLIEST,
        )
        assert len(advice.recommendations) == 1


class TestWeather:
    @pytest.mark.asyncio
    async def test_weather_fetched_for_origin_at_deadline_hour(self) -> None:
        oracle = FakeOracle(
            durations={TravelMode.WALKING: constant(1800)},
            weather=WeatherSignal(precipitation_likely=True, high_wind=True),
        )
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.WALKING]), earliest=EARLIEST,
        )
        assert oracle.weather_calls == [(ORIGIN.lat, ORIGIN.lng, DEADLINE)]
        assert advice.weather_buffer_minutes == 20
        assert advice.weather_reasons == ["precipitation expected", "high wind gusts"]
        assert advice.total_buffer_minutes == PROCEDURAL + 20
        assert advice.effective_deadline == DEADLINE - (PROCEDURAL + 20) * 60
        [rec] = advice.recommendations
        assert rec.departure == advice.effective_deadline - 1800
        assert rec.buffer_minutes == PROCEDURAL + 20

    @pytest.mark.asyncio
    async def test_prefetched_weather_skips_oracle(self) -> None:
        oracle = FakeOracle(durations={TravelMode.WALKING: constant(1800)})
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.WALKING]),
            earliest=EARLIEST,
            weather=WeatherSignal(high_wind=True),
        )
        assert oracle.weather_calls == []
        assert advice.weather_buffer_minutes == 10

    @pytest.mark.asyncio
    async def test_weather_failure_adds_nothing(self) -> None:
        oracle = FakeOracle(durations={TravelMode.WALKING: constant(1800)}, weather_error=True)
        advice = await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.WALKING]), earliest=EARLIEST,
        )
        assert advice.weather_buffer_minutes == 0
        assert advice.weather_reasons == []
        assert len(advice.recommendations) == 1

    @pytest.mark.asyncio
    async def test_weather_fetch_can_be_disabled(self) -> None:
        oracle = FakeOracle(durations={TravelMode.WALKING: constant(1800)})
        await RecommendationAssembler(oracle).assemble(
            _request([TravelMode.WALKING]), earliest=EARLIEST, fetch_weather=False,
        )
        assert oracle.weather_calls == []


class TestInvalidInput:
    @pytest.mark.asyncio
    async def test_no_modes_raises(self) -> None:
        request = _request([TravelMode.WALKING]).model_copy(update={"modes": []})
        with pytest.raises(InvalidTripRequestError):
            await RecommendationAssembler(FakeOracle()).assemble(request)

    @pytest.mark.asyncio
    async def test_raw_dict_validated(self) -> None:
        oracle = FakeOracle(durations={TravelMode.WALKING: constant(1800)})
        advice = await RecommendationAssembler(oracle).assemble(
            {
                "origin": {"lat": ORIGIN.lat, "lng": ORIGIN.lng},
                "destination": {"lat": AIRPORT.lat, "lng": AIRPORT.lng},
                "deadline": DEADLINE,
                "modes": ["walking"],
                "buffer": {"category": "international", "bags": True, "extra_minutes": 10},
            },
            earliest=EARLIEST,
        )
        assert advice.procedural_buffer_minutes == 270

    @pytest.mark.asyncio
    async def test_bad_category_raises(self) -> None:
        with pytest.raises(InvalidTripRequestError):
            await RecommendationAssembler(FakeOracle()).assemble({
                "origin": {"lat": 0, "lng": 0},
                "destination": {"lat": 1, "lng": 1},
                "deadline": DEADLINE,
                "modes": ["walking"],
                "buffer": {"category": "interplanetary"},
            })

    @pytest.mark.asyncio
    async def test_missing_deadline_raises(self) -> None:
        with pytest.raises(InvalidTripRequestError):
            await RecommendationAssembler(FakeOracle()).assemble({
                "origin": {"lat": 0, "lng": 0},
                "destination": {"lat": 1, "lng": 1},
                "modes": ["walking"],
                "buffer": {"category": "domestic"},
            })

    @pytest.mark.asyncio
    async def test_empty_mode_list_in_dict_raises(self) -> None:
        with pytest.raises(InvalidTripRequestError):
            await RecommendationAssembler(FakeOracle()).assemble({
                "origin": {"lat": 0, "lng": 0},
                "destination": {"lat": 1, "lng": 1},
                "deadline": DEADLINE,
                "modes": [],
                "buffer": {"category": "domestic"},
            })
