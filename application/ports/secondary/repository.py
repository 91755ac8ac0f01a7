"""Secondary storage port for cars."""

from typing import List, Optional, Protocol, runtime_checkable

from domain.entities import Car


@runtime_checkable
class CarRepository(Protocol):
    """CRUD access to stored cars, keyed by ``car_id``.

    One repository instance serves one unit of work.
    """

    def add(self, car: Car) -> Car:
        """Store a new car and return it with its assigned identifier."""
        ...

    def get(self, car_id: int) -> Optional[Car]:
        ...

    def get_page(self, page: int, count: int) -> List[Car]:
        """Return cars ordered by identifier, ``page`` is 1-based."""
        ...

    def count(self) -> int:
        ...

    def update(self, car: Car) -> Car:
        ...

    def delete(self, car_id: int) -> bool:
        """Delete a car, returning False when it did not exist."""
        ...
