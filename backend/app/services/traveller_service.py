"""
Traveller snapshot queries over registrations and travel plans.
"""
from sqlalchemy import or_
from sqlalchemy.orm import Session, contains_eager
from typing import List, Optional, Tuple
from datetime import datetime
import logging
import math
from app.core.exceptions import InvalidInputError
from app.models.registration import Registration, RegistrationType, TravelPlan
from app.schemas.transportation import (
    Pagination, TransportMode, TravellerFilters, TravellerPage, TravellerRecord
)

logger = logging.getLogger(__name__)

SORT_FIELDS = ("registration_date", "name")


def _travelling_alumni(db: Session):
    """Base query: alumni registrations with a travel plan that says travelling."""
    return db.query(Registration).join(Registration.travel_plan).options(
        contains_eager(Registration.travel_plan)
    ).filter(
        Registration.registration_type == RegistrationType.ALUMNI,
        TravelPlan.is_travelling.is_(True)
    )


def _parse_mode_filter(value: Optional[str]) -> Optional[TransportMode]:
    if value is None:
        return None
    try:
        return TransportMode(value.strip().lower())
    except ValueError:
        raise InvalidInputError(f"Unknown mode of transport: {value}")


def load_travellers(db: Session, filters: Optional[TravellerFilters] = None) -> List[TravellerRecord]:
    """Fetch the filtered traveller snapshot as normalized records."""
    filters = filters or TravellerFilters()
    mode = _parse_mode_filter(filters.mode_of_transport)
    query = _travelling_alumni(db)

    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.filter(or_(
            Registration.name.ilike(pattern),
            Registration.email.ilike(pattern),
            Registration.school.ilike(pattern),
            TravelPlan.starting_location.ilike(pattern),
            TravelPlan.nearest_landmark.ilike(pattern),
        ))
    if filters.district:
        query = query.filter(TravelPlan.pin_district == filters.district)
    if filters.state:
        query = query.filter(TravelPlan.pin_state == filters.state)
    if filters.date:
        query = query.filter(TravelPlan.travel_date == filters.date)

    registrations = query.order_by(Registration.id).all()
    travellers = [TravellerRecord.from_registration(r) for r in registrations]

    # Stored modes are free text; compare after normalization
    if mode is not None:
        travellers = [t for t in travellers if t.mode_of_transport == mode]

    logger.debug(f"Loaded {len(travellers)} travellers with filters {filters.model_dump(exclude_none=True)}")
    return travellers


def paginate(
    travellers: List[TravellerRecord],
    page: int = 1,
    limit: int = 20,
    sort_by: str = "registration_date",
    sort_order: str = "desc"
) -> TravellerPage:
    """Sort and slice a traveller list."""
    if page < 1 or limit < 1:
        raise InvalidInputError("page and limit must be at least 1")
    if sort_by not in SORT_FIELDS:
        raise InvalidInputError(f"Cannot sort by {sort_by}")
    if sort_order not in ("asc", "desc"):
        raise InvalidInputError("sort_order must be 'asc' or 'desc'")

    if sort_by == "name":
        key = lambda t: (t.name.lower(), t.id)
    else:
        key = lambda t: (t.registration_date or datetime.min, t.id)
    ordered = sorted(travellers, key=key, reverse=(sort_order == "desc"))

    total = len(ordered)
    start = (page - 1) * limit
    return TravellerPage(
        travellers=ordered[start:start + limit],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        ),
    )


def list_providers(db: Session, filters: TravellerFilters, **page_args) -> TravellerPage:
    """Vehicle providers in the filtered snapshot, paginated."""
    providers = [t for t in load_travellers(db, filters) if t.is_provider]
    return paginate(providers, **page_args)


def list_seekers(db: Session, filters: TravellerFilters, **page_args) -> TravellerPage:
    """Ride seekers in the filtered snapshot, paginated."""
    seekers = [t for t in load_travellers(db, filters) if t.is_seeker]
    return paginate(seekers, **page_args)


def _distinct_values(db: Session, column) -> List[str]:
    rows: List[Tuple[Optional[str]]] = db.query(column).join(
        Registration, TravelPlan.registration_id == Registration.id
    ).filter(
        Registration.registration_type == RegistrationType.ALUMNI,
        TravelPlan.is_travelling.is_(True)
    ).distinct().all()
    return sorted({value.strip() for (value,) in rows if value and value.strip()})


def list_districts(db: Session) -> List[str]:
    """Distinct districts among travellers."""
    return _distinct_values(db, TravelPlan.pin_district)


def list_states(db: Session) -> List[str]:
    """Distinct states among travellers."""
    return _distinct_values(db, TravelPlan.pin_state)
