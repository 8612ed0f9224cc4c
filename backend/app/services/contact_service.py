"""
Contact handoff helpers: outreach message and WhatsApp deep link.
"""
from urllib.parse import quote
import re
from app.core.exceptions import InvalidInputError
from app.schemas.transportation import TravellerRecord

WHATSAPP_BASE_URL = "https://wa.me"
LOCAL_NUMBER_LENGTH = 10


def generate_ride_message(
    seeker: TravellerRecord,
    provider: TravellerRecord,
    from_seeker: bool = True
) -> str:
    """Default message for coordinating a ride, written by either side."""
    if from_seeker:
        return (
            f"Hi {provider.name}, I saw your ride offer for "
            f"{provider.starting_location or 'the event'} on "
            f"{provider.travel_date or 'the travel date'}. I'm looking for a ride from "
            f"{seeker.starting_location or 'nearby area'}. Could we coordinate? Thanks!"
        )
    seats = provider.vehicle_capacity if provider.vehicle_capacity > 0 else "some"
    return (
        f"Hi {seeker.name}, I have a vehicle going from "
        f"{provider.starting_location or 'the area'} on "
        f"{provider.travel_date or 'the travel date'} and noticed you're looking for a ride. "
        f"I have {seats} seats available. Would you like to join? Thanks!"
    )


def format_phone_number(phone: str, country_code: str = "91") -> str:
    """Digits only, prefixed with the country code unless a longer number already carries it."""
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        raise InvalidInputError("Phone number has no digits")
    if len(digits) > LOCAL_NUMBER_LENGTH and digits.startswith(country_code):
        return digits
    return f"{country_code}{digits}"


def build_whatsapp_link(phone: str, message: str = "", country_code: str = "91") -> str:
    """Deep link that opens a WhatsApp chat with the message prefilled."""
    number = format_phone_number(phone, country_code)
    return f"{WHATSAPP_BASE_URL}/{number}?text={quote(message, safe='')}"
