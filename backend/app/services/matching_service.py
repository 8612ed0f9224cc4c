"""
Ride matching service for pairing ride seekers with vehicle providers.
"""
from datetime import date, datetime
from typing import List, Optional, Sequence
import logging
import math
from app.core.exceptions import InvalidInputError, NotFoundError
from app.schemas.transportation import (
    CompatibilityResult, MatchOptions, MatchResponse, SeekerSummary,
    TransportMode, TravellerRecord
)
from app.services.proximity_service import UNKNOWN_BUCKET, bucket_key

logger = logging.getLogger(__name__)

# Score weights, summing to 100
DISTANCE_WEIGHT = 60.0
DATE_WEIGHT = 30.0
CAPACITY_WEIGHT = 10.0

DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y")


class MatchingPolicy:
    """Distance and date assumptions used when scoring providers."""
    def __init__(
        self,
        bucket_length: int = 3,
        different_area_km: float = 30.0,
        unknown_distance_km: float = 999.0,
        date_window_days: int = 1
    ):
        self.bucket_length = bucket_length
        self.different_area_km = different_area_km
        self.unknown_distance_km = unknown_distance_km
        self.date_window_days = date_window_days


def validate_options(options: MatchOptions) -> Optional[TransportMode]:
    """
    Check matching options and return the provider mode filter, if any.

    Raises InvalidInputError for out-of-range or contradictory values.
    """
    if not math.isfinite(options.max_distance_km):
        raise InvalidInputError("max_distance_km must be a finite number")
    if options.max_distance_km < 0:
        raise InvalidInputError("max_distance_km must not be negative")
    if options.limit < 1:
        raise InvalidInputError("limit must be at least 1")

    raw_mode = (options.mode_of_transport or "").strip().lower()
    if not raw_mode or raw_mode == "all":
        return None
    try:
        mode = TransportMode(raw_mode)
    except ValueError:
        raise InvalidInputError(f"Unknown mode of transport: {options.mode_of_transport}")
    if mode == TransportMode.LOOKING_FOR_TRANSPORT:
        raise InvalidInputError("Providers cannot be filtered by a ride-seeking mode")
    return mode


def find_seeker(seeker_id: int, travellers: Sequence[TravellerRecord]) -> TravellerRecord:
    """Resolve a seeker in the snapshot or raise NotFoundError."""
    for traveller in travellers:
        if traveller.id == seeker_id:
            if not traveller.is_seeker:
                raise NotFoundError(f"Traveller {seeker_id} is not looking for transport")
            return traveller
    raise NotFoundError(f"Seeker {seeker_id} not found")


def _normalize_location(value: Optional[str]) -> str:
    return " ".join((value or "").lower().split())


def estimate_distance_km(
    seeker: TravellerRecord,
    provider: TravellerRecord,
    policy: MatchingPolicy
) -> float:
    """
    Approximate distance from pincode buckets.

    Same bucket or same named locality counts as zero; two known but different
    buckets cost a fixed penalty; an unknown bucket costs the unknown distance.
    """
    seeker_location = _normalize_location(seeker.starting_location)
    if seeker_location and seeker_location == _normalize_location(provider.starting_location):
        return 0.0

    seeker_key = bucket_key(seeker.postal_code, policy.bucket_length)
    provider_key = bucket_key(provider.postal_code, policy.bucket_length)
    if UNKNOWN_BUCKET in (seeker_key, provider_key):
        return float(policy.unknown_distance_km)
    if seeker_key == provider_key:
        return 0.0
    return float(policy.different_area_km)


def parse_travel_date(value: Optional[str]) -> Optional[date]:
    """Parse a travel date as entered on the form; None if unreadable."""
    if not value:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value.strip()[:10], fmt).date()
        except ValueError:
            continue
    return None


def _is_exact_date(seeker: TravellerRecord, provider: TravellerRecord) -> bool:
    return seeker.travel_date is not None and seeker.travel_date == provider.travel_date


def _within_window(seeker: TravellerRecord, provider: TravellerRecord, days: int) -> bool:
    seeker_date = parse_travel_date(seeker.travel_date)
    provider_date = parse_travel_date(provider.travel_date)
    if seeker_date is None or provider_date is None:
        return False
    return abs((seeker_date - provider_date).days) <= days


def _is_eligible(
    seeker: TravellerRecord,
    provider: TravellerRecord,
    options: MatchOptions,
    mode_filter: Optional[TransportMode]
) -> bool:
    if provider.id == seeker.id or not provider.is_provider:
        return False
    if provider.vehicle_capacity < seeker.group_size:
        return False
    if options.same_date_only and provider.travel_date != seeker.travel_date:
        return False
    if mode_filter is not None and provider.mode_of_transport != mode_filter:
        return False
    return True


def score_provider(
    seeker: TravellerRecord,
    provider: TravellerRecord,
    distance_km: float,
    options: MatchOptions,
    policy: MatchingPolicy
) -> float:
    """Compatibility score in [0, 100] for an eligible provider within range."""
    if options.max_distance_km > 0:
        distance_term = DISTANCE_WEIGHT * (1 - distance_km / options.max_distance_km)
    else:
        distance_term = DISTANCE_WEIGHT

    if _is_exact_date(seeker, provider):
        date_term = DATE_WEIGHT
    elif not options.same_date_only and _within_window(seeker, provider, policy.date_window_days):
        date_term = DATE_WEIGHT / 2
    else:
        date_term = 0.0

    # Tie-breaker: exact fits beat large vehicles carrying one small group
    spare_seats = provider.vehicle_capacity - seeker.group_size
    capacity_term = CAPACITY_WEIGHT / (1 + spare_seats)

    score = distance_term + date_term + capacity_term
    return round(min(100.0, max(0.0, score)), 2)


def find_compatible_rides(
    seeker_id: int,
    travellers: Sequence[TravellerRecord],
    options: Optional[MatchOptions] = None,
    policy: Optional[MatchingPolicy] = None
) -> List[CompatibilityResult]:
    """
    Rank vehicle providers for one seeker.

    Hard constraints (capacity, same date, mode, distance) filter first; the
    survivors are sorted by score descending, then distance ascending.
    An empty list means no provider qualified.
    """
    options = options or MatchOptions()
    validate_options(options)
    seeker = find_seeker(seeker_id, travellers)
    return rank_providers(seeker, travellers, options, policy)


def rank_providers(
    seeker: TravellerRecord,
    travellers: Sequence[TravellerRecord],
    options: Optional[MatchOptions] = None,
    policy: Optional[MatchingPolicy] = None
) -> List[CompatibilityResult]:
    """Rank providers for an already resolved seeker."""
    options = options or MatchOptions()
    policy = policy or MatchingPolicy()
    mode_filter = validate_options(options)

    results = []
    for provider in travellers:
        if not _is_eligible(seeker, provider, options, mode_filter):
            continue
        distance_km = estimate_distance_km(seeker, provider, policy)
        if distance_km > options.max_distance_km:
            continue
        results.append(CompatibilityResult(
            provider=provider,
            distance_km=distance_km,
            compatibility_score=score_provider(seeker, provider, distance_km, options, policy),
            date_match=_is_exact_date(seeker, provider),
            spare_seats=provider.vehicle_capacity - seeker.group_size,
        ))

    results.sort(key=lambda r: (-r.compatibility_score, r.distance_km, r.provider.id))

    logger.info(
        f"Seeker {seeker.id}: {len(results)} compatible providers "
        f"(max_distance={options.max_distance_km}, same_date_only={options.same_date_only})"
    )
    return results[:options.limit]


def build_match_response(seeker: TravellerRecord, results: List[CompatibilityResult]) -> MatchResponse:
    """Wrap ranked results with the seeker's own details."""
    return MatchResponse(
        seeker=SeekerSummary(
            id=seeker.id,
            name=seeker.name,
            starting_location=seeker.starting_location,
            postal_code=seeker.postal_code,
            travel_date=seeker.travel_date,
            group_size=seeker.group_size,
        ),
        compatible_rides=results,
        total_matches=len(results),
    )
