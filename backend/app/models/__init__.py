"""Models package - Import all models for SQLAlchemy registration."""
from app.models.registration import Registration, RegistrationType, TravelPlan

__all__ = [
    "Registration",
    "RegistrationType",
    "TravelPlan",
]
