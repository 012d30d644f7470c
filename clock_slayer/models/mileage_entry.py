"""Mileage entry model definitions."""
from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MileageEntryBase(BaseModel):
    """Base mileage entry fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    project_id: int
    miles: Decimal = Field(ge=0)
    date: date_type
    notes: Optional[str] = None


class MileageEntryCreate(MileageEntryBase):
    """Mileage entry creation model."""

    id: Optional[int] = Field(default=None, ge=1)


class MileageEntryUpdate(BaseModel):
    """Mileage entry update model; id and timestamps in the body are ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    project_id: Optional[int] = None
    miles: Optional[Decimal] = Field(default=None, ge=0)
    date: Optional[date_type] = None
    notes: Optional[str] = None


class MileageEntry(MileageEntryBase):
    """Full mileage entry model with database fields."""

    id: int = Field(alias="_id", serialization_alias="id")
    created_at: datetime
    updated_at: datetime
