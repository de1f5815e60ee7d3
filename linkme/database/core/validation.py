"""Input coercion shared by the core service modules."""

import uuid
from uuid import UUID

from linkme.exceptions import ValidationError


def as_uuid(value, field: str) -> UUID:
    """Return ``value`` as a UUID or raise ``ValidationError`` naming the field."""
    if isinstance(value, UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(f"{field} is not a valid id") from None


def require_text(value, field: str) -> str:
    """Return ``value`` stripped, or raise ``ValidationError`` when it is blank."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


def require_choice(value, choices, field: str) -> str:
    if value not in choices:
        raise ValidationError(f"{field} must be one of: {', '.join(choices)}")
    return value


def require_coordinates(latitude, longitude) -> tuple[float, float]:
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("latitude and longitude must be numbers") from None
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise ValidationError("latitude/longitude out of range")
    return lat, lon
