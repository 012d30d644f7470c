"""Time entry model definitions."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TimeEntryBase(BaseModel):
    """Base time entry fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    project_id: int
    start_time: datetime
    end_time: datetime
    duration: Decimal  # hours, stored as given
    notes: Optional[str] = None


class TimeEntryCreate(TimeEntryBase):
    """Time entry creation model."""

    id: Optional[int] = Field(default=None, ge=1)


class TimeEntryUpdate(BaseModel):
    """Time entry update model; id and timestamps in the body are ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    project_id: Optional[int] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[Decimal] = None
    notes: Optional[str] = None


class TimeEntry(TimeEntryBase):
    """Full time entry model with database fields."""

    id: int = Field(alias="_id", serialization_alias="id")
    created_at: datetime
    updated_at: datetime
