"""
Registration and travel plan models for event attendees.
"""
from sqlalchemy import Column, String, Boolean, Enum as SQLEnum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class RegistrationType(str, enum.Enum):
    """Registration type enumeration."""
    ALUMNI = "Alumni"
    STAFF = "Staff"
    OTHER = "Other"


class Registration(BaseModel):
    """Registration model representing one event attendee."""
    __tablename__ = "registrations"

    registration_type = Column(SQLEnum(RegistrationType), default=RegistrationType.ALUMNI, nullable=False, index=True)
    name = Column(String(100), nullable=False, index=True)
    email = Column(String(100), nullable=False, index=True)
    contact_number = Column(String(20), nullable=False)
    whatsapp_number = Column(String(20), nullable=True)
    school = Column(String(200), nullable=True)

    # Relationships
    travel_plan = relationship("TravelPlan", back_populates="registration", uselist=False, cascade="all, delete-orphan")


class TravelPlan(BaseModel):
    """Transportation details stated at registration time."""
    __tablename__ = "travel_plans"

    registration_id = Column(Integer, ForeignKey("registrations.id"), nullable=False, unique=True, index=True)
    is_travelling = Column(Boolean, default=False, nullable=False, index=True)
    starting_location = Column(String(200), nullable=True)
    start_pincode = Column(String(10), nullable=True)
    pin_district = Column(String(100), nullable=True, index=True)
    pin_state = Column(String(100), nullable=True, index=True)
    nearest_landmark = Column(String(200), nullable=True)
    travel_date = Column(String(20), nullable=True, index=True)  # Stored as entered, compared as text
    travel_time = Column(String(20), nullable=True)
    mode_of_transport = Column(String(30), nullable=True, index=True)
    need_parking = Column(Boolean, default=False, nullable=False)
    ready_for_ride_share = Column(Boolean, default=False, nullable=False)
    vehicle_capacity = Column(Integer, default=0, nullable=False)  # Seats beyond the driver
    group_size = Column(Integer, default=1, nullable=False)
    special_requirements = Column(Text, nullable=True)

    # Relationships
    registration = relationship("Registration", back_populates="travel_plan")
