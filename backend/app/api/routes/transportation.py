"""
Transportation (ride-matching) routes for the admin dashboard.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from app.db.session import get_db
from app.core.config import settings
from app.core.exceptions import InvalidInputError, NotFoundError
from app.schemas.transportation import (
    ContactLinkResponse, MatchOptions, MatchResponse, ProximityReport,
    TransportStats, TravellerFilters, TravellerPage
)
from app.services import traveller_service
from app.services.contact_service import (
    build_whatsapp_link, format_phone_number, generate_ride_message
)
from app.services.export_service import export_rows, rows_to_csv
from app.services.matching_service import (
    MatchingPolicy, build_match_response, find_seeker, rank_providers, validate_options
)
from app.services.proximity_service import build_proximity_groups, summarize_groups
from app.services.transport_stats_service import compute_transport_stats

router = APIRouter(prefix="/transportation", tags=["transportation"])


def get_filters(
    search: Optional[str] = None,
    mode_of_transport: Optional[str] = None,
    district: Optional[str] = None,
    state: Optional[str] = None,
    travel_date: Optional[str] = Query(None, alias="date"),
) -> TravellerFilters:
    """Collect snapshot filters from query parameters."""
    return TravellerFilters(
        search=search,
        mode_of_transport=mode_of_transport,
        district=district,
        state=state,
        date=travel_date,
    )


def get_matching_policy() -> MatchingPolicy:
    """Matching policy from application settings."""
    return MatchingPolicy(
        bucket_length=settings.PINCODE_BUCKET_LENGTH,
        different_area_km=settings.DIFFERENT_AREA_DISTANCE_KM,
        unknown_distance_km=settings.UNKNOWN_DISTANCE_KM,
        date_window_days=settings.DATE_WINDOW_DAYS,
    )


def bad_request(error: InvalidInputError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


def not_found(error: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))


@router.get("/stats", response_model=TransportStats)
async def get_transportation_stats(
    filters: TravellerFilters = Depends(get_filters),
    db: Session = Depends(get_db)
):
    """Get traveller counts by role and mode."""
    try:
        travellers = traveller_service.load_travellers(db, filters)
    except InvalidInputError as e:
        raise bad_request(e)
    return compute_transport_stats(travellers)


@router.get("/providers", response_model=TravellerPage)
async def get_vehicle_providers(
    filters: TravellerFilters = Depends(get_filters),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort_by: str = "registration_date",
    sort_order: str = "desc",
    db: Session = Depends(get_db)
):
    """List people offering seats in their vehicle."""
    try:
        return traveller_service.list_providers(
            db, filters, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order
        )
    except InvalidInputError as e:
        raise bad_request(e)


@router.get("/seekers", response_model=TravellerPage)
async def get_ride_seekers(
    filters: TravellerFilters = Depends(get_filters),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort_by: str = "registration_date",
    sort_order: str = "desc",
    db: Session = Depends(get_db)
):
    """List people looking for a ride."""
    try:
        return traveller_service.list_seekers(
            db, filters, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order
        )
    except InvalidInputError as e:
        raise bad_request(e)


@router.get("/compatible-rides", response_model=MatchResponse)
async def get_compatible_rides(
    seeker_id: int,
    max_distance_km: float = settings.DEFAULT_MAX_DISTANCE_KM,
    same_date_only: bool = True,
    mode_of_transport: Optional[str] = None,
    limit: int = settings.MAX_COMPATIBLE_RIDES,
    policy: MatchingPolicy = Depends(get_matching_policy),
    db: Session = Depends(get_db)
):
    """Rank vehicle providers for one ride seeker."""
    options = MatchOptions(
        max_distance_km=max_distance_km,
        same_date_only=same_date_only,
        mode_of_transport=mode_of_transport,
        limit=limit,
    )
    travellers = traveller_service.load_travellers(db)
    try:
        validate_options(options)
        seeker = find_seeker(seeker_id, travellers)
        results = rank_providers(seeker, travellers, options, policy)
    except NotFoundError as e:
        raise not_found(e)
    except InvalidInputError as e:
        raise bad_request(e)

    return build_match_response(seeker, results)


@router.get("/proximity-groups", response_model=ProximityReport)
async def get_proximity_groups(
    min_group_size: int = settings.DEFAULT_MIN_GROUP_SIZE,
    filters: TravellerFilters = Depends(get_filters),
    db: Session = Depends(get_db)
):
    """Group travellers by pincode area with local supply and demand."""
    try:
        travellers = traveller_service.load_travellers(db, filters)
        groups = build_proximity_groups(
            travellers,
            min_group_size=min_group_size,
            bucket_length=settings.PINCODE_BUCKET_LENGTH,
        )
    except InvalidInputError as e:
        raise bad_request(e)
    return summarize_groups(travellers, groups)


@router.get("/districts", response_model=List[str])
async def get_transportation_districts(db: Session = Depends(get_db)):
    """Get all districts travellers start from."""
    return traveller_service.list_districts(db)


@router.get("/states", response_model=List[str])
async def get_transportation_states(db: Session = Depends(get_db)):
    """Get all states travellers start from."""
    return traveller_service.list_states(db)


@router.get("/export")
async def export_transportation_data(
    export_type: str = Query("all", alias="type"),
    db: Session = Depends(get_db)
):
    """Download travellers as CSV."""
    try:
        rows = export_rows(traveller_service.load_travellers(db), export_type)
    except InvalidInputError as e:
        raise bad_request(e)

    filename = f"transportation_{export_type}_{date.today().isoformat()}.csv"
    return Response(
        content=rows_to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/contact-link", response_model=ContactLinkResponse)
async def get_contact_link(
    seeker_id: int,
    provider_id: int,
    from_seeker: bool = True,
    db: Session = Depends(get_db)
):
    """Build a WhatsApp link with a prefilled ride coordination message."""
    travellers = traveller_service.load_travellers(db)
    try:
        seeker = find_seeker(seeker_id, travellers)
    except NotFoundError as e:
        raise not_found(e)

    provider = next((t for t in travellers if t.id == provider_id and t.is_provider), None)
    if not provider:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Provider {provider_id} not found"
        )

    recipient = provider if from_seeker else seeker
    phone = recipient.whatsapp_number or recipient.contact_number or ""
    message = generate_ride_message(seeker, provider, from_seeker=from_seeker)
    try:
        number = format_phone_number(phone, settings.WHATSAPP_COUNTRY_CODE)
        url = build_whatsapp_link(phone, message, country_code=settings.WHATSAPP_COUNTRY_CODE)
    except InvalidInputError as e:
        raise bad_request(e)

    return ContactLinkResponse(message=message, whatsapp_url=url, phone_number=number)
