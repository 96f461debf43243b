"""Host availability schemas."""

import datetime as dt
from datetime import time
from typing import Optional

from pydantic import Field, field_serializer, field_validator, model_validator

from ._strict_base import StrictModel, StrictRequestModel
from .base import ensure_date_only, format_hhmm, parse_hhmm


class AvailabilityCreate(StrictRequestModel):
    """A one-off window (``date``) or a weekly one (``day_of_week``, 0 = Sunday)."""

    date: Optional[dt.date] = None
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    start_time: time
    end_time: time

    @field_validator("date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return ensure_date_only(v, "date")

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return parse_hhmm(v)

    @model_validator(mode="after")
    def _check_window(self) -> "AvailabilityCreate":
        if (self.date is None) == (self.day_of_week is None):
            raise ValueError("Provide either date or day_of_week")
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class AvailabilityResponse(StrictModel):
    id: str
    host_id: str
    date: Optional[dt.date] = None
    day_of_week: Optional[int] = None
    start_time: time
    end_time: time
    is_active: bool

    @field_serializer("start_time", "end_time")
    def _serialize_time(self, value: time) -> str:
        return format_hhmm(value)
