from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Header(BaseModel):
    key: str
    value: str


class GymData(BaseModel):
    capacity: int = 0
    count: int = 0  # not checked against capacity
    last_update: Optional[datetime] = None  # UTC


class Gym(BaseModel):
    shortcode: str
    brand: str = ""
    location: str = ""
    data: GymData = Field(default_factory=GymData)


class Endpoint(BaseModel):
    name: str
    brand: str = ""
    url: str
    id: str
    headers: List[Header] = []
    timezone: str = ""  # empty means config.DEFAULT_TIMEZONE
    gyms: List[Gym] = []


class RawGymRecord(BaseModel):
    """One record as it appears in the page's `var data = {...}` literal."""

    # no coercion: "50" or true is a malformed record, not a number
    model_config = ConfigDict(strict=True)

    capacity: int
    count: int
    last_update: str = Field(alias="lastUpdate")


@dataclass
class FetchOutcome:
    endpoint: Endpoint
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None
