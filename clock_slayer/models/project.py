"""Project model definitions."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_MILEAGE_RATE = Decimal("0.67")


class ProjectBase(BaseModel):
    """Base project fields (camelCase on the wire, snake_case accepted)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1)
    hourly_rate: Decimal = Field(default=Decimal("0"), ge=0)
    mileage_rate: Decimal = Field(default=DEFAULT_MILEAGE_RATE, ge=0)


class ProjectCreate(ProjectBase):
    """Project creation model - id may be supplied by the client."""

    id: Optional[int] = Field(default=None, ge=1)


class ProjectUpdate(BaseModel):
    """
    Project update model - all fields optional.

    Clients may send back the full record; id and timestamps are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: Optional[str] = Field(default=None, min_length=1)
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0)
    mileage_rate: Optional[Decimal] = Field(default=None, ge=0)


class Project(ProjectBase):
    """Full project model with database fields."""

    id: int = Field(alias="_id", serialization_alias="id")
    created_at: datetime
    updated_at: datetime
