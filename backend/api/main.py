"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import places
from services.places_search import get_default_search_service
from settings import settings

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG_LOGGING else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Create app
app = FastAPI(
    title="Places Search Gateway",
    description="Cost-aware places search with caching and daily provider budgets",
    version="0.1.0",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(places.router, prefix="/api/places", tags=["places"])


@app.on_event("startup")
def startup_event():
    """Build the search service (and usage tables when the SQL store is on)."""
    service = get_default_search_service()
    logging.getLogger(__name__).info(
        "places gateway ready: providers=%s budget=%s",
        service.provider_names,
        service.tracker.budget,
    )


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Places Search Gateway"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
