"""
Pydantic schemas for Registration entity.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from app.models.registration import RegistrationType


class TravelPlanBase(BaseModel):
    """Base travel plan schema."""
    is_travelling: bool = False
    starting_location: Optional[str] = None
    start_pincode: Optional[str] = Field(default=None, max_length=10)
    pin_district: Optional[str] = None
    pin_state: Optional[str] = None
    nearest_landmark: Optional[str] = None
    travel_date: Optional[str] = None  # e.g. "2026-01-26"
    travel_time: Optional[str] = None
    mode_of_transport: Optional[str] = None
    need_parking: bool = False
    ready_for_ride_share: bool = False
    vehicle_capacity: int = Field(default=0, ge=0)
    group_size: int = Field(default=1, ge=0)
    special_requirements: Optional[str] = None


class TravelPlanCreate(TravelPlanBase):
    """Schema for travel plan creation."""
    pass


class TravelPlanResponse(TravelPlanBase):
    """Schema for travel plan response."""
    id: int

    class Config:
        from_attributes = True


class RegistrationCreate(BaseModel):
    """Schema for registration creation."""
    registration_type: RegistrationType = RegistrationType.ALUMNI
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    contact_number: str = Field(..., min_length=1, max_length=20)
    whatsapp_number: Optional[str] = Field(default=None, max_length=20)
    school: Optional[str] = None
    travel_plan: TravelPlanCreate = Field(default_factory=TravelPlanCreate)


class RegistrationResponse(BaseModel):
    """Schema for registration response."""
    id: int
    registration_type: RegistrationType
    name: str
    email: str
    contact_number: str
    whatsapp_number: Optional[str] = None
    school: Optional[str] = None
    travel_plan: Optional[TravelPlanResponse] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
