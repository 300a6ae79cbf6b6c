"""
Parcel Pydantic schemas.

Defines the in-memory parcel entity handed to and returned by the store.
"""

import re
from datetime import datetime, timezone

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from parcel_tracker.app.models.parcel_enums import ParcelStatus

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Largest value an INTEGER column holds on SQLite and PostgreSQL BIGINT
MAX_INTEGER = 2**63 - 1

RFC3339_PATTERN = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})[Tt]"
    r"(?P<time>\d{2}:\d{2}:\d{2})(?P<fraction>\.\d+)?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})"
)

_aware_datetime = TypeAdapter(AwareDatetime)


def utc_timestamp() -> str:
    """Current UTC time as an RFC3339 string with second precision."""
    return datetime.now(timezone.utc).strftime(RFC3339_FORMAT)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC3339 timestamp into an aware datetime.

    Requires the full date-time grammar: a T separator (either case) and a
    Z or numeric offset. Fractions beyond microseconds are truncated.

    Raises:
        ValueError: If value is not an RFC3339 date-time
    """
    match = RFC3339_PATTERN.fullmatch(value)
    if match is None:
        raise ValueError(f"created_at must be an RFC3339 timestamp, got {value!r}")

    fraction = (match.group("fraction") or "")[:7]
    offset = match.group("offset").upper()
    normalized = f"{match.group('date')}T{match.group('time')}{fraction}{offset}"
    try:
        return _aware_datetime.validate_python(normalized)
    except ValidationError:
        raise ValueError(f"created_at is not a valid date-time, got {value!r}") from None


class Parcel(BaseModel):
    """
    Schema for a parcel.

    number is 0 until the store assigns one on insert.
    """
    model_config = ConfigDict(from_attributes=True)

    number: int = Field(default=0, ge=0, le=MAX_INTEGER, description="Store-assigned parcel number")
    client: int = Field(..., ge=-MAX_INTEGER - 1, le=MAX_INTEGER, description="Owning client identifier")
    status: ParcelStatus = Field(default=ParcelStatus.REGISTERED)
    address: str = Field(..., description="Delivery address")
    created_at: str = Field(default_factory=utc_timestamp, description="RFC3339 creation time")

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, value: str) -> str:
        # The original string is kept; parsing only checks it
        parse_rfc3339(value)
        return value
