"""Car entity.

Pure domain entity with no framework dependencies.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Car:
    """A car as stored by the application."""

    car_id: int
    cylinders: int
    make: str
    model: str
    created: datetime = field(default_factory=_utcnow)
    modified: Optional[datetime] = None

    def touch(self) -> "Car":
        """Return a copy stamped with the current modification time."""
        return replace(self, modified=_utcnow())

    @property
    def last_modified(self) -> datetime:
        return self.modified or self.created
