"""Settings schemas bound from configuration sections.

Section keys may be written in PascalCase (``CacheProfiles``) or snake_case.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class CacheLocation(str, Enum):
    """Where a response may be cached."""
    ANY = "Any"
    CLIENT = "Client"
    NONE = "None"


class CacheProfile(BaseModel):
    """Caching rules applied to a class of responses."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True)

    duration: int = Field(0, ge=0, description="Max age in seconds")
    location: CacheLocation = CacheLocation.ANY
    no_store: bool = False
    vary_by_header: Optional[str] = None

    def to_cache_control(self) -> str:
        """Render the profile as a Cache-Control header value."""
        if self.no_store:
            return "no-store"
        if self.location == CacheLocation.NONE:
            return "no-cache"
        visibility = "public" if self.location == CacheLocation.ANY else "private"
        return f"{visibility},max-age={self.duration}"


class CacheProfileSettings(BaseModel):
    """Named cache profiles, read from the ``CacheProfileSettings`` section."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True)

    cache_profiles: Dict[str, CacheProfile] = Field(default_factory=dict)

    def get_profile(self, name: str) -> Optional[CacheProfile]:
        return self.cache_profiles.get(name)
