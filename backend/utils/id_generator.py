"""ID generation utilities."""
import uuid
from datetime import datetime, timezone


def generate_trip_id() -> str:
    """
    Generate a unique trip ID.

    Format: trip_{timestamp}_{uuid_short}
    Example: trip_20260208_a3f2d1c4

    Returns:
        str: A unique trip identifier
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d")
    uuid_short = str(uuid.uuid4())[:8]
    return f"trip_{timestamp}_{uuid_short}"


def generate_request_id() -> str:
    """Generate a globally unique generation request ID."""
    return str(uuid.uuid4())


def generate_itinerary_id(itinerary_type: str) -> str:
    """Generate an ID for a single itinerary, e.g. ``budget_<uuid4>``."""
    return f"{itinerary_type}_{uuid.uuid4()}"


def stored_itinerary_key(trip_id: str, itinerary_type: str) -> str:
    """Cache key for the itinerary of one type generated for a trip."""
    return f"{trip_id}_{itinerary_type}"
