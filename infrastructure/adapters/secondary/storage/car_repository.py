"""Car storage backend and the repository built on it.

``InMemoryCarStore`` is the process-wide storage backend. ``StoreCarRepository``
is the per-request view on it: it counts the work done during its unit of
work and reports it when the scope closes.
"""

import threading
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from loguru import logger

from domain.entities import Car


class InMemoryCarStore:
    """Thread-safe car storage keyed by ``car_id``."""

    def __init__(self, cars: Iterable[Car] = ()):
        self._cars: Dict[int, Car] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        for car in cars:
            self.insert(car)

    @classmethod
    def with_sample_data(cls) -> "InMemoryCarStore":
        return cls([
            Car(car_id=1, cylinders=4, make="Honda", model="Civic"),
            Car(car_id=2, cylinders=6, make="Toyota", model="Supra"),
            Car(car_id=3, cylinders=8, make="Ford", model="Mustang"),
        ])

    def insert(self, car: Car) -> Car:
        """Store a car, assigning an identifier when ``car_id`` is 0."""
        with self._lock:
            if car.car_id <= 0:
                car = replace(car, car_id=self._next_id)
            elif car.car_id in self._cars:
                raise KeyError(f"Car {car.car_id} already exists")
            self._cars[car.car_id] = car
            self._next_id = max(self._next_id, car.car_id + 1)
            return car

    def find(self, car_id: int) -> Optional[Car]:
        with self._lock:
            return self._cars.get(car_id)

    def all(self) -> List[Car]:
        with self._lock:
            return sorted(self._cars.values(), key=lambda car: car.car_id)

    def replace(self, car: Car) -> Car:
        with self._lock:
            if car.car_id not in self._cars:
                raise KeyError(f"Car {car.car_id} does not exist")
            self._cars[car.car_id] = car
            return car

    def remove(self, car_id: int) -> bool:
        with self._lock:
            return self._cars.pop(car_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._cars)


class StoreCarRepository:
    """``CarRepository`` for one unit of work."""

    def __init__(self, store: InMemoryCarStore):
        self._store = store
        self._operations = 0
        self._closed = False

    def _track(self) -> None:
        if self._closed:
            raise RuntimeError("Repository used after its unit of work ended")
        self._operations += 1

    def add(self, car: Car) -> Car:
        self._track()
        return self._store.insert(replace(car, car_id=0))

    def get(self, car_id: int) -> Optional[Car]:
        self._track()
        return self._store.find(car_id)

    def get_page(self, page: int, count: int) -> List[Car]:
        if page < 1 or count < 1:
            raise ValueError("page and count must be positive")
        self._track()
        start = (page - 1) * count
        return self._store.all()[start:start + count]

    def count(self) -> int:
        self._track()
        return len(self._store)

    def update(self, car: Car) -> Car:
        self._track()
        return self._store.replace(car)

    def delete(self, car_id: int) -> bool:
        self._track()
        return self._store.remove(car_id)

    @property
    def operations(self) -> int:
        return self._operations

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            logger.debug(f"Car repository closed after {self._operations} operations")
