"""
API routes for running the analytics engine over caller-supplied observations.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from fastapi import APIRouter, Body, Depends, HTTPException
from api.auth import verify_api_key
from analytics.config import AnalyticsConfig
from analytics.engine import AnalyticsEngine, coerce_observations
from analytics.models import AnalysisResult, Observation
from reports.generator import ReportGenerator
from validators import InvalidArgument, ValidationError, parse_timestamp, utc_now
from logger import get_logger

router = APIRouter()
logger = get_logger("api.analytics")

_engine: Optional[AnalyticsEngine] = None


def get_engine() -> AnalyticsEngine:
    """Get engine instance."""
    global _engine
    if _engine is None:
        _engine = AnalyticsEngine()
    return _engine


def _run(payload: Dict[str, Any]) -> Tuple[AnalysisResult, AnalyticsConfig, List[Observation], datetime]:
    """Run the engine and return the result with the windowed observations it covered."""
    raw_observations = payload.get("observations", [])
    if not isinstance(raw_observations, list):
        raise InvalidArgument("observations must be a list")
    config = AnalyticsConfig.from_dict(payload.get("config") or {})
    observations = coerce_observations(raw_observations)
    now = parse_timestamp(payload["now"]) if payload.get("now") else utc_now()
    engine = get_engine()
    result = engine.analyze(observations, config, now=now)
    return result, config, engine.filter_window(observations, config, now), now


@router.post("/analytics/analyze")
async def analyze_observations(
    payload: Dict[str, Any] = Body(...),
    api_key: str = Depends(verify_api_key)
):
    """Analyse observations and return the result bundle."""
    try:
        result, _, _, _ = _run(payload)
    except ValidationError as e:
        logger.warning(f"Rejected analysis request: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    return result.to_dict()


@router.post("/analytics/export")
async def export_analysis(
    payload: Dict[str, Any] = Body(...),
    api_key: str = Depends(verify_api_key)
):
    """Analyse observations and return the downloadable export document."""
    try:
        result, config, window, now = _run(payload)
    except ValidationError as e:
        logger.warning(f"Rejected export request: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    generator = ReportGenerator()
    return {
        "filename": generator.export_filename(now),
        "document": generator.build_export(result, config, window, now),
    }
