"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import registrations, transportation

api_router = APIRouter()

# Include all route modules
api_router.include_router(registrations.router)
api_router.include_router(transportation.router)
