"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from journaloo.api.routes import users, journeys, entries

api_router = APIRouter()

# Include all route modules
api_router.include_router(users.router)
api_router.include_router(journeys.router)
api_router.include_router(entries.router)
