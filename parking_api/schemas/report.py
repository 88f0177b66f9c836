"""
Parking API — Report Schemas
=============================

What:  Query contracts for the date-ranged reports and the report bodies.
How:   Query models are applied by `validate_query()` (see validation.py),
       which evaluates every field before deciding pass/fail.

Date Boundaries:
    startDate / endDate accept YYYY-MM-DD or an ISO 8601 datetime.
    A bare date expands to the whole day: startDate → 00:00:00 UTC,
    endDate → 23:59:59.999999 UTC. Both boundaries are inclusive.
    Naive datetimes are read as UTC.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from parking_api.schemas.common import UTCDateTime
from parking_api.schemas.parking import SessionResponse
from parking_api.timeutils import as_utc, end_of_day, start_of_day

GROUP_BY_PARKING = "parking"
GROUP_BY_DAY = "day"
GROUP_BY_VALUES = (GROUP_BY_PARKING, GROUP_BY_DAY)


def parse_boundary(value: Any, label: str, end: bool) -> datetime:
    """
    Parse a query-string date boundary.

    Raises:
        ValueError: missing/empty ("<label> is required") or unparsable.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{label} is required")
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return end_of_day(value) if end else start_of_day(value)

    text = str(value).strip()
    try:
        day = date.fromisoformat(text)
    except ValueError:
        day = None
    if day is not None:
        return end_of_day(day) if end else start_of_day(day)

    try:
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValueError(f"{label} must be a valid date (YYYY-MM-DD or ISO 8601)")


class DateRangeQuery(BaseModel):
    start_date: datetime = Field(alias="startDate")
    end_date: datetime = Field(alias="endDate")

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def fill_missing_boundaries(cls, data: Any) -> Any:
        # An absent boundary still runs its field validator, so it is reported
        # under its query name ("startDate") with the "is required" message.
        if isinstance(data, dict):
            data = dict(data)
            for name in ("start_date", "end_date"):
                alias = cls.model_fields[name].alias
                if alias not in data and name not in data:
                    data[alias] = None
        return data

    @field_validator("start_date", mode="before")
    @classmethod
    def parse_start_date(cls, v: Any) -> datetime:
        return parse_boundary(v, "Start date", end=False)

    @field_validator("end_date", mode="before")
    @classmethod
    def parse_end_date(cls, v: Any) -> datetime:
        return parse_boundary(v, "End date", end=True)

    @model_validator(mode="after")
    def check_order(self) -> "DateRangeQuery":
        if self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class RevenueQuery(DateRangeQuery):
    group_by: Optional[str] = Field(default=None, alias="groupBy")

    @field_validator("group_by", mode="before")
    @classmethod
    def validate_group_by(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        if v not in GROUP_BY_VALUES:
            raise ValueError("Group by must be either parking or day")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Report bodies
# ══════════════════════════════════════════════════════════════════════════


class SessionReportResponse(BaseModel):
    """Body of /api/reports/incoming and /api/reports/outgoing."""
    start_date: UTCDateTime
    end_date: UTCDateTime
    count: int
    sessions: List[SessionResponse]


class LotOccupancy(BaseModel):
    parking_lot_id: uuid.UUID
    name: str
    location: str
    capacity: int
    occupied: int = Field(description="Sessions in this lot without an exit time")
    available: int
    occupancy_rate: float = Field(description="occupied / capacity, 0.0 to 1.0")


class OccupancyReportResponse(BaseModel):
    generated_at: UTCDateTime
    total_capacity: int
    total_occupied: int
    lots: List[LotOccupancy]


class RevenueGroup(BaseModel):
    """
    One aggregation bucket. Exactly one of (parking_lot_id, day) is set,
    depending on groupBy.
    """
    parking_lot_id: Optional[uuid.UUID] = None
    parking_lot_name: Optional[str] = None
    day: Optional[date] = None
    revenue: Decimal
    session_count: int


class RevenueReportResponse(BaseModel):
    # Amounts are Decimal and serialize as strings ("12.50"), so the
    # per-group amounts add up to total_revenue exactly on the wire.
    start_date: UTCDateTime
    end_date: UTCDateTime
    group_by: Optional[str] = None
    total_revenue: Decimal
    session_count: int
    groups: List[RevenueGroup] = Field(default_factory=list)
