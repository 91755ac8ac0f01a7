"""Translators between the Car entity and its transport representations.

Each translator class maps in both directions and is registered once per
direction. Instances hold only immutable configuration, so one instance is
shared by every request.
"""

from functools import singledispatchmethod

from application.dto import CarDTO, SaveCarDTO
from domain.entities import Car


class CarToCarTranslator:
    """Maps ``Car`` <-> ``CarDTO``."""

    def __init__(self, base_path: str = "/cars"):
        self._base_path = base_path.rstrip("/")

    @singledispatchmethod
    def translate(self, source):
        raise TypeError(f"{type(self).__name__} cannot translate {type(source).__name__}")

    @translate.register(Car)
    def _(self, source: Car) -> CarDTO:
        return CarDTO(
            car_id=source.car_id,
            cylinders=source.cylinders,
            make=source.make,
            model=source.model,
            url=f"{self._base_path}/{source.car_id}",
        )

    @translate.register(CarDTO)
    def _(self, source: CarDTO) -> Car:
        return Car(
            car_id=source.car_id,
            cylinders=source.cylinders,
            make=source.make,
            model=source.model,
        )


class CarToSaveCarTranslator:
    """Maps ``Car`` <-> ``SaveCarDTO``.

    A car built from a ``SaveCarDTO`` has ``car_id`` 0 until the repository
    assigns one.
    """

    @singledispatchmethod
    def translate(self, source):
        raise TypeError(f"{type(self).__name__} cannot translate {type(source).__name__}")

    @translate.register(Car)
    def _(self, source: Car) -> SaveCarDTO:
        return SaveCarDTO(cylinders=source.cylinders, make=source.make, model=source.model)

    @translate.register(SaveCarDTO)
    def _(self, source: SaveCarDTO) -> Car:
        return Car(car_id=0, cylinders=source.cylinders, make=source.make, model=source.model)
