"""
FastAPI application for the Stockwise analytics service.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from api.routes import analytics
from health import get_health
from logger import setup_logging
import os

setup_logging()

app = FastAPI(
    title="Stockwise Analytics API",
    description="Trend, anomaly, forecast and insight analysis for warehouse time series",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analytics.router, prefix="/api/v1", tags=["analytics"])


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Stockwise Analytics API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint (no auth required)."""
    return get_health()
