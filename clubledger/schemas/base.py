"""Base schemas with common configuration."""
from decimal import Decimal
from typing import Annotated
from pydantic import BaseModel, ConfigDict, PlainSerializer
from datetime import datetime
from clubledger.utils.datetime_helpers import ensure_utc


def serialize_datetime_utc(dt: datetime) -> str:
    """
    Serialize datetime to ISO 8601 with explicit UTC timezone.

    SQLite stores datetimes as naive strings, so we treat them as UTC.
    """
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


# Applied in both python and JSON dumps, so responses carry numbers and Z-suffixed timestamps.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float)]
UTCDateTime = Annotated[datetime, PlainSerializer(serialize_datetime_utc, return_type=str)]


class BaseSchema(BaseModel):
    """Base schema with common configuration for all API responses."""

    model_config = ConfigDict(
        from_attributes=True,
    )
