"""Car-related Data Transfer Objects.

These are the transport shapes exchanged with API clients. Field names are
serialized in camelCase.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CarDTO(BaseModel):
    """Car as returned to API clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    car_id: int
    cylinders: int
    make: str
    model: str
    url: Optional[str] = None


class SaveCarDTO(BaseModel):
    """Car as submitted by API clients when creating or replacing a car."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    cylinders: int = Field(..., ge=1, le=20)
    make: str = Field(..., min_length=1, max_length=20)
    model: str = Field(..., min_length=1, max_length=20)
