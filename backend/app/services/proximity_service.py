"""
Proximity grouping service.

Travellers are bucketed by the leading digits of their starting pincode
(three digits mark a sorting district in the Indian PIN scheme) so organizers
can see which areas can cover their own ride demand.
"""
from collections import Counter
from typing import Dict, List, Sequence
import logging
from app.core.exceptions import InvalidInputError
from app.schemas.transportation import (
    CommonDate, ProximityGroup, ProximityReport, ProximitySummary, TravellerRecord
)

logger = logging.getLogger(__name__)

UNKNOWN_BUCKET = "unknown"
DEFAULT_BUCKET_LENGTH = 3
TOP_COMMON_DATES = 3


def bucket_key(postal_code: str, length: int = DEFAULT_BUCKET_LENGTH) -> str:
    """Return the locality bucket for a pincode, or "unknown" if it is unusable."""
    if not postal_code:
        return UNKNOWN_BUCKET
    code = postal_code.strip()
    prefix = code[:length]
    if len(prefix) < length or not prefix.isdigit():
        return UNKNOWN_BUCKET
    return prefix


def _area_name(key: str, members: Sequence[TravellerRecord]) -> str:
    first = members[0]
    return first.district or first.starting_location or f"Area {key}"


def _common_dates(members: Sequence[TravellerRecord]) -> List[CommonDate]:
    counts = Counter(m.travel_date for m in members if m.travel_date)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [CommonDate(date=d, count=c) for d, c in ranked[:TOP_COMMON_DATES]]


def _build_group(key: str, members: List[TravellerRecord]) -> ProximityGroup:
    providers = [m for m in members if m.is_provider]
    seekers = [m for m in members if m.is_seeker]
    total_capacity = sum(p.vehicle_capacity for p in providers)
    total_seekers = sum(s.group_size for s in seekers)

    return ProximityGroup(
        pincode_base=key,
        area_name=_area_name(key, members),
        member_count=len(members),
        vehicle_providers=len(providers),
        ride_seekers=len(seekers),
        total_capacity=total_capacity,
        total_seekers=total_seekers,
        can_self_sustain=total_capacity >= total_seekers,
        common_dates=_common_dates(members),
        members=list(members),
    )


def build_proximity_groups(
    travellers: Sequence[TravellerRecord],
    min_group_size: int = 2,
    bucket_length: int = DEFAULT_BUCKET_LENGTH
) -> List[ProximityGroup]:
    """
    Partition travellers into pincode buckets and compute supply/demand.

    Groups smaller than min_group_size are left out. The result is sorted by
    member count (largest first), then by bucket key.
    """
    if min_group_size < 1:
        raise InvalidInputError("min_group_size must be at least 1")
    if bucket_length < 1:
        raise InvalidInputError("bucket_length must be at least 1")

    buckets: Dict[str, List[TravellerRecord]] = {}
    for traveller in travellers:
        key = bucket_key(traveller.postal_code, bucket_length)
        buckets.setdefault(key, []).append(traveller)

    groups = [
        _build_group(key, members)
        for key, members in buckets.items()
        if len(members) >= min_group_size
    ]
    groups.sort(key=lambda g: (-g.member_count, g.pincode_base))

    logger.debug(
        f"Bucketed {len(travellers)} travellers into {len(buckets)} buckets, "
        f"{len(groups)} with at least {min_group_size} members"
    )
    return groups


def summarize_groups(
    travellers: Sequence[TravellerRecord],
    groups: List[ProximityGroup]
) -> ProximityReport:
    """Wrap proximity groups with overall counts for the dashboard."""
    return ProximityReport(
        groups=groups,
        total_groups=len(groups),
        summary=ProximitySummary(
            total_travellers=len(travellers),
            total_grouped_travellers=sum(g.member_count for g in groups),
            self_sustainable_groups=sum(1 for g in groups if g.can_self_sustain),
        ),
    )
