"""
Transportation statistics service for the admin dashboard.
"""
from typing import Dict, Sequence
from app.schemas.transportation import (
    ModeStats, ProviderStats, SeekerStats, TransportStats, TravellerRecord
)


def compute_transport_stats(travellers: Sequence[TravellerRecord]) -> TransportStats:
    """
    Count travellers by role and mode.

    Capacity is only summed over providers and seats needed only over seekers.
    The mode breakdown is keyed in sorted order so repeated calls serialize
    identically.
    """
    providers = ProviderStats()
    seekers = SeekerStats()
    breakdown: Dict[str, ModeStats] = {}

    for traveller in travellers:
        mode = breakdown.setdefault(traveller.mode_of_transport.value, ModeStats())
        mode.count += 1

        if traveller.is_provider:
            providers.count += 1
            providers.total_capacity += traveller.vehicle_capacity
            if traveller.need_parking:
                providers.need_parking += 1
            mode.total_capacity += traveller.vehicle_capacity
        elif traveller.is_seeker:
            seekers.count += 1
            seekers.total_needed += traveller.group_size

    return TransportStats(
        total_travellers=len(travellers),
        vehicle_providers=providers,
        ride_seekers=seekers,
        mode_breakdown={key: breakdown[key] for key in sorted(breakdown)},
    )
