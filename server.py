import asyncio
import datetime as _dt
import json
import os
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple, Union

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

from config import InvalidInputError, SimulationInput, has_required_inputs
from constants import DEFAULT_CONFIG_FILENAME
from derived_stats import CompoundingStats, compute_stats, summary_stats
from simulation import project


FILL_IN_MESSAGE = "Please fill in the information."


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class StatsResponse(BaseModel):
    index: int
    year: int
    is_final_year: bool
    earnings: int
    invested: int
    growth_per_dollar: Optional[int] = None
    taxes_paid: int
    labeled: List[Tuple[str, str]]


class NotReadyResponse(BaseModel):
    ready: bool = False
    message: str


class ProjectionResponse(BaseModel):
    ready: bool
    message: Optional[str] = None
    years: List[int] = []
    balance: List[float] = []
    tax_paid: List[float] = []
    summary: Optional[StatsResponse] = None


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class ProjectionRequest(BaseModel):
    inputs: Dict[str, Any] = Field(
        ...,
        description="Projection inputs (same fields as a scenario in config.json).",
    )
    start_year: Optional[int] = Field(
        None, description="Calendar year of year offset 0. Defaults to the current year."
    )


class StatsRequest(ProjectionRequest):
    index: int = Field(..., description="Year offset to describe.")


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _configure_logging() -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        level="INFO",
        colorize=True,
    )
    logger.add(
        "server.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
        level="INFO",
        rotation="10 MB",
    )


# ---------------------------------------------------------------------------
# App lifecycle
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(_app: FastAPI):
    _configure_logging()
    logger.info("Retirement Projection API starting up")
    yield
    logger.info("Retirement Projection API shutting down")


app = FastAPI(
    title="Retirement Projection API",
    description="Computes year-by-year retirement balances and taxes for the dashboard chart and sidebar.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _stats_payload(stats: CompoundingStats) -> dict:
    payload = stats.model_dump()
    payload["labeled"] = stats.labeled_values()
    return payload


def _validated_inputs(inputs: Dict[str, Any]) -> SimulationInput:
    try:
        return SimulationInput.from_params(inputs)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _run_projection(params: SimulationInput, start_year: Optional[int]) -> dict:
    """Synchronous work -- called via ``asyncio.to_thread``."""
    if start_year is None:
        start_year = _dt.date.today().year
    result = project(params)
    return {
        "ready": True,
        "years": [start_year + i for i in range(len(result.balance))],
        "balance": [round(v, 2) for v in result.balance],
        "tax_paid": [round(v, 2) for v in result.tax_paid],
        "summary": _stats_payload(summary_stats(result, params, start_year)),
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/api/health")
async def health_check():
    return {"status": "ok"}


@app.get("/api/config/default")
async def get_default_config():
    """Return the bundled ``config.json`` as a ready-to-use template."""
    config_path = os.path.join(os.path.dirname(__file__), DEFAULT_CONFIG_FILENAME)
    if not os.path.exists(config_path):
        raise HTTPException(status_code=404, detail="Default config.json not found.")
    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


@app.post("/api/validate")
async def validate_inputs(body: ProjectionRequest):
    """Validate projection inputs without running the projection."""
    params = _validated_inputs(body.inputs)
    return {"valid": True, "years_to_retirement": params.years_to_retirement}


@app.post("/api/project", response_model=ProjectionResponse)
async def project_endpoint(body: ProjectionRequest):
    """Run the projection and return everything the chart and sidebar display."""
    if not has_required_inputs(body.inputs):
        return {"ready": False, "message": FILL_IN_MESSAGE}

    params = _validated_inputs(body.inputs)
    logger.info(
        f"Projection request: age {params.current_age} -> {params.retirement_age}, "
        f"income ${params.annual_income:,.0f}"
    )
    return await asyncio.to_thread(_run_projection, params, body.start_year)


@app.post("/api/stats", response_model=Union[StatsResponse, NotReadyResponse])
async def stats_endpoint(body: StatsRequest):
    """Statistics for a single year, as shown when hovering over the chart."""
    if not has_required_inputs(body.inputs):
        return {"ready": False, "message": FILL_IN_MESSAGE}

    params = _validated_inputs(body.inputs)
    result = project(params)
    try:
        stats = compute_stats(body.index, result, params, body.start_year)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _stats_payload(stats)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    _configure_logging()
    uvicorn.run("server:app", host="0.0.0.0", port=8080, reload=True)
