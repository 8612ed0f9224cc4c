"""
Pydantic schemas for the transportation (ride-matching) feature.

Raw travel-plan values are normalized once here, in TravellerRecord, so the
grouping, matching and statistics services only ever see clean, typed records.
"""
from pydantic import BaseModel, Field, computed_field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
import enum


class TransportMode(str, enum.Enum):
    """Mode of transport stated at registration."""
    CAR = "car"
    BUS = "bus"
    TRAIN = "train"
    FLIGHT = "flight"
    TWO_WHEELER = "two-wheeler"
    BOAT = "boat"
    LOOKING_FOR_TRANSPORT = "looking-for-transport"
    OTHER = "other"


class TravellerRole(str, enum.Enum):
    """Ride-sharing role derived from mode and capacity."""
    PROVIDER = "provider"
    SEEKER = "seeker"
    NONE = "none"


# Private vehicles whose owners can offer seats
VEHICLE_MODES = frozenset({TransportMode.CAR, TransportMode.BUS, TransportMode.TWO_WHEELER})

_TRUTHY = {"yes", "y", "true", "1", "on"}


def parse_mode(value: Any) -> TransportMode:
    """Map a free-form mode string onto TransportMode, defaulting to OTHER."""
    if isinstance(value, TransportMode):
        return value
    if value is None:
        return TransportMode.OTHER
    try:
        return TransportMode(str(value).strip().lower())
    except ValueError:
        return TransportMode.OTHER


def _coerce_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        return int(float(value))
    except (OverflowError, TypeError):
        raise ValueError(f"{value!r} is not a whole number")


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in _TRUTHY


class TravellerRecord(BaseModel):
    """One travelling registrant, normalized for the matching services."""
    id: int
    name: str
    email: Optional[str] = None
    contact_number: Optional[str] = None
    whatsapp_number: Optional[str] = None
    school: Optional[str] = None
    mode_of_transport: TransportMode = TransportMode.OTHER
    starting_location: Optional[str] = None
    postal_code: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    nearest_landmark: Optional[str] = None
    travel_date: Optional[str] = None
    travel_time: Optional[str] = None
    vehicle_capacity: int = 0  # Seats beyond the driver
    group_size: int = 1
    need_parking: bool = False
    ready_for_ride_share: bool = False
    special_requirements: Optional[str] = None
    registration_date: Optional[datetime] = None

    class Config:
        frozen = True

    @field_validator("mode_of_transport", mode="before")
    @classmethod
    def normalize_mode(cls, v):
        return parse_mode(v)

    @field_validator(
        "email", "contact_number", "whatsapp_number", "school", "starting_location",
        "postal_code", "district", "state", "nearest_landmark", "travel_date",
        "travel_time", "special_requirements",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        """Strip text fields; empty strings become None."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("vehicle_capacity", mode="before")
    @classmethod
    def normalize_capacity(cls, v):
        capacity = _coerce_int(v, 0)
        if capacity < 0:
            raise ValueError("vehicle_capacity must be >= 0")
        return capacity

    @field_validator("group_size", mode="before")
    @classmethod
    def normalize_group_size(cls, v):
        # A seeker always needs at least their own seat
        size = _coerce_int(v, 1)
        if size < 0:
            raise ValueError("group_size must be >= 0")
        return max(size, 1)

    @field_validator("need_parking", "ready_for_ride_share", mode="before")
    @classmethod
    def normalize_flag(cls, v):
        return _coerce_bool(v)

    @computed_field
    @property
    def role(self) -> TravellerRole:
        if self.mode_of_transport == TransportMode.LOOKING_FOR_TRANSPORT:
            return TravellerRole.SEEKER
        if self.mode_of_transport in VEHICLE_MODES and self.vehicle_capacity > 0:
            return TravellerRole.PROVIDER
        return TravellerRole.NONE

    @property
    def is_provider(self) -> bool:
        return self.role == TravellerRole.PROVIDER

    @property
    def is_seeker(self) -> bool:
        return self.role == TravellerRole.SEEKER

    @classmethod
    def from_registration(cls, registration) -> "TravellerRecord":
        """Build a record from a Registration row and its travel plan."""
        plan = registration.travel_plan
        return cls(
            id=registration.id,
            name=registration.name,
            email=registration.email,
            contact_number=registration.contact_number,
            whatsapp_number=registration.whatsapp_number,
            school=registration.school,
            mode_of_transport=plan.mode_of_transport,
            starting_location=plan.starting_location,
            postal_code=plan.start_pincode,
            district=plan.pin_district,
            state=plan.pin_state,
            nearest_landmark=plan.nearest_landmark,
            travel_date=plan.travel_date,
            travel_time=plan.travel_time,
            vehicle_capacity=plan.vehicle_capacity,
            group_size=plan.group_size,
            need_parking=plan.need_parking,
            ready_for_ride_share=plan.ready_for_ride_share,
            special_requirements=plan.special_requirements,
            registration_date=registration.created_at,
        )


class TravellerFilters(BaseModel):
    """Snapshot filters; "all" or blank means no filter."""
    search: Optional[str] = None
    mode_of_transport: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    date: Optional[str] = None

    @field_validator("search", "mode_of_transport", "district", "state", "date", mode="before")
    @classmethod
    def drop_all(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        if not v or v.lower() == "all":
            return None
        return v


class CommonDate(BaseModel):
    """Travel date shared by members of a proximity group."""
    date: str
    count: int


class ProximityGroup(BaseModel):
    """Travellers sharing a pincode bucket, with local supply and demand."""
    pincode_base: str
    area_name: str
    member_count: int
    vehicle_providers: int
    ride_seekers: int
    total_capacity: int
    total_seekers: int  # Seats needed by seeker members
    can_self_sustain: bool
    common_dates: List[CommonDate] = []
    members: List[TravellerRecord] = []


class ProximitySummary(BaseModel):
    total_travellers: int
    total_grouped_travellers: int
    self_sustainable_groups: int


class ProximityReport(BaseModel):
    """Response for the proximity groups endpoint."""
    groups: List[ProximityGroup]
    total_groups: int
    summary: ProximitySummary


class MatchOptions(BaseModel):
    """Options for a compatible-rides query."""
    max_distance_km: float = 50.0
    same_date_only: bool = True
    mode_of_transport: Optional[str] = None
    limit: int = 20


class CompatibilityResult(BaseModel):
    """One ranked provider for a seeker."""
    provider: TravellerRecord
    distance_km: float
    compatibility_score: float
    date_match: bool
    spare_seats: int


class SeekerSummary(BaseModel):
    id: int
    name: str
    starting_location: Optional[str] = None
    postal_code: Optional[str] = None
    travel_date: Optional[str] = None
    group_size: int


class MatchResponse(BaseModel):
    """Response for the compatible rides endpoint."""
    seeker: SeekerSummary
    compatible_rides: List[CompatibilityResult]
    total_matches: int


class ProviderStats(BaseModel):
    count: int = 0
    total_capacity: int = 0
    need_parking: int = 0


class SeekerStats(BaseModel):
    count: int = 0
    total_needed: int = 0


class ModeStats(BaseModel):
    count: int = 0
    total_capacity: int = 0


class TransportStats(BaseModel):
    """Dashboard counters over a traveller snapshot."""
    total_travellers: int = 0
    vehicle_providers: ProviderStats = Field(default_factory=ProviderStats)
    ride_seekers: SeekerStats = Field(default_factory=SeekerStats)
    mode_breakdown: Dict[str, ModeStats] = {}


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class TravellerPage(BaseModel):
    """Paginated provider or seeker listing."""
    travellers: List[TravellerRecord]
    pagination: Pagination


class ContactLinkResponse(BaseModel):
    """Outreach message and WhatsApp deep link for a seeker/provider pair."""
    message: str
    whatsapp_url: str
    phone_number: str
