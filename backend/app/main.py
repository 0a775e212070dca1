"""FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
from app.logging_config import setup_logging

# Import routers
from app.routers import trips, proposals, votes, commits

# Import all models so Base.metadata knows about them
from app.models.trip import Trip, TripMember      # noqa: F401
from app.models.itinerary import Day, Block       # noqa: F401
from app.models.activity import Activity          # noqa: F401
from app.models.proposal import BlockProposal     # noqa: F401
from app.models.vote import Vote                  # noqa: F401
from app.models.commit import Commit              # noqa: F401

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Trip Voting",
    description="Collaborative trip planning: propose activities, vote, and commit winners to the itinerary",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(trips.router, prefix="/api/trips", tags=["Trips"])
app.include_router(proposals.router, prefix="/api/trips", tags=["Proposals"])
app.include_router(votes.router, prefix="/api/trips", tags=["Votes"])
app.include_router(commits.router, prefix="/api/trips", tags=["Commits"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
