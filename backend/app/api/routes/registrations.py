"""
Registration routes for event attendees and their travel plans.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.registration import Registration, TravelPlan
from app.schemas.registration import RegistrationCreate, RegistrationResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/registrations", tags=["registrations"])


@router.post("", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def create_registration(registration_data: RegistrationCreate, db: Session = Depends(get_db)):
    """Register an attendee together with their travel plan."""
    registration = Registration(
        registration_type=registration_data.registration_type,
        name=registration_data.name.strip(),
        email=registration_data.email,
        contact_number=registration_data.contact_number.strip(),
        whatsapp_number=registration_data.whatsapp_number,
        school=registration_data.school,
    )
    db.add(registration)
    db.flush()

    plan = TravelPlan(
        registration_id=registration.id,
        **registration_data.travel_plan.model_dump()
    )
    db.add(plan)
    db.commit()
    db.refresh(registration)

    logger.info(f"Registration {registration.id} created (travelling={plan.is_travelling})")
    return registration


@router.get("/{registration_id}", response_model=RegistrationResponse)
async def get_registration(registration_id: int, db: Session = Depends(get_db)):
    """Get registration by ID."""
    registration = db.query(Registration).filter(Registration.id == registration_id).first()
    if not registration:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Registration not found"
        )
    return registration
