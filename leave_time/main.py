"""leave-time — latest safe departure across travel modes.

This is the application entry point.  It wires the HTTP oracle,
RecommendationAssembler, and REST endpoints together.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from leave_time.api.leave_time import create_leave_time_router
from leave_time.config import settings
from leave_time.core.assembler import PlannerConfig, RecommendationAssembler
from leave_time.oracle.google_maps import GoogleMapsClient
from leave_time.oracle.http_oracle import HttpDurationOracle
from leave_time.oracle.open_meteo import OpenMeteoClient

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

# ── Planner ──────────────────────────────────────────────────────────────────

planner_config = PlannerConfig(
    procedural_floor_minutes=settings.procedural_floor_minutes,
    default_pickup_minutes=settings.default_pickup_minutes,
    default_parking_minutes=settings.default_parking_minutes,
    weather_addend_minutes=settings.weather_addend_minutes,
    max_probes=settings.search_max_probes,
    step_seconds=settings.search_step_seconds,
    revalidate=settings.search_revalidate,
)

# ── Oracle ───────────────────────────────────────────────────────────────────

maps_client: GoogleMapsClient | None = None
oracle: HttpDurationOracle | None = None
assembler: RecommendationAssembler | None = None

if settings.google_maps_api_key:
    maps_client = GoogleMapsClient(
        api_key=settings.google_maps_api_key,
        base_url=settings.google_maps_base_url,
        timeout=settings.http_timeout_seconds,
    )
    weather_client = OpenMeteoClient(
        base_url=settings.open_meteo_base_url,
        timeout=settings.http_timeout_seconds,
        precipitation_probability_threshold=settings.precipitation_probability_threshold,
        precipitation_mm_threshold=settings.precipitation_mm_threshold,
        wind_gust_kmh_threshold=settings.wind_gust_kmh_threshold,
    )
    oracle = HttpDurationOracle(maps_client, weather_client)
    assembler = RecommendationAssembler(oracle, planner_config)
else:
    logger.warning("GOOGLE_MAPS_API_KEY is not set; /api/leave-time will answer 503")

# ── Lifespan ─────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Shutdown: release the httpx connection pools
    if oracle is not None:
        await oracle.aclose()
        logger.info("HTTP oracle clients closed")


# ── App ──────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    description="Latest safe departure across driving, rideshare, transit, walking and bicycling",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Routes ───────────────────────────────────────────────────────────────────

app.include_router(create_leave_time_router(
    assembler,
    time_zone_resolver=maps_client.time_zone if maps_client is not None else None,
    default_traffic_model=settings.default_traffic_model,
))


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/health")
async def health() -> dict:
    return {
        "status": "ok",
        "oracle_configured": assembler is not None,
        "max_probes": planner_config.max_probes,
        "step_seconds": planner_config.step_seconds,
    }
