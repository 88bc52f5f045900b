"""API v1 router aggregation."""

from fastapi import APIRouter

from training_tracker.api.v1.endpoints import (
    durations,
    exercises,
    health,
    sets,
    stats,
    warmups,
    workouts,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
api_router.include_router(sets.router, prefix="/sets", tags=["sets"])
api_router.include_router(warmups.router, prefix="/warmups", tags=["warmups"])
api_router.include_router(durations.router, prefix="/durations", tags=["durations"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
