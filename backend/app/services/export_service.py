"""
Flat CSV export of the traveller snapshot.
"""
from typing import List, Sequence
import csv
import io
from app.core.exceptions import InvalidInputError
from app.schemas.transportation import TravellerRecord

EXPORT_TYPES = ("all", "providers", "seekers")

CSV_HEADERS = [
    "Name",
    "Email",
    "Contact Number",
    "WhatsApp Number",
    "School",
    "Mode of Transport",
    "Starting Location",
    "Pincode",
    "District",
    "State",
    "Travel Date",
    "Travel Time",
    "Vehicle Capacity",
    "Group Size",
    "Ready for Rideshare",
    "Need Parking",
    "Special Requirements",
    "Registration Date",
]


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def _row(traveller: TravellerRecord) -> List[str]:
    return [
        traveller.name or "",
        traveller.email or "",
        traveller.contact_number or "",
        traveller.whatsapp_number or "",
        traveller.school or "",
        traveller.mode_of_transport.value,
        traveller.starting_location or "",
        traveller.postal_code or "",
        traveller.district or "",
        traveller.state or "",
        traveller.travel_date or "",
        traveller.travel_time or "",
        str(traveller.vehicle_capacity) if traveller.is_provider else "",
        str(traveller.group_size) if traveller.is_seeker else "",
        _yes_no(traveller.ready_for_ride_share),
        _yes_no(traveller.need_parking),
        traveller.special_requirements or "",
        traveller.registration_date.date().isoformat() if traveller.registration_date else "",
    ]


def export_rows(travellers: Sequence[TravellerRecord], kind: str = "all") -> List[List[str]]:
    """Header row followed by one row per traveller of the requested kind."""
    if kind not in EXPORT_TYPES:
        raise InvalidInputError(f"Unknown export type: {kind}")
    if kind == "providers":
        travellers = [t for t in travellers if t.is_provider]
    elif kind == "seekers":
        travellers = [t for t in travellers if t.is_seeker]
    return [CSV_HEADERS] + [_row(t) for t in travellers]


def rows_to_csv(rows: List[List[str]]) -> str:
    """Serialize rows with every field quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()
