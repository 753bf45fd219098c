from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.core.datetime_utils import to_naive_utc
from app.models.camel_model import CamelModel


class MatchModel(CamelModel):
    id: int
    date: datetime
    time: str  # Kick-off time as shown to players, e.g. "19:30"
    opponent: str = Field(min_length=1)
    location: str = Field(min_length=1)
    details: Optional[str] = None
    created_by: int

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return to_naive_utc(v)
