"""Car commands - one handler per verb over the Car resource.

Handlers are scoped: each request gets its own handler, sharing the request's
repository. Translators are shared singletons.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Optional

from loguru import logger
from pydantic import ValidationError

from application.dto import CarDTO, SaveCarDTO
from application.ports.primary import CommandResult
from application.ports.secondary import CarRepository, Translator
from application.settings import CacheProfileSettings
from core.di import Options
from domain.entities import Car

CAR_CACHE_PROFILE = "Car"


def _not_found(car_id: int) -> CommandResult:
    return CommandResult(404, {"error": f"Car {car_id} not found"})


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class GetCarCommandHandler:
    """Return one car, honouring ``If-Modified-Since``."""

    repository: CarRepository
    car_translator: Translator[Car, CarDTO]
    cache_profiles: Options[CacheProfileSettings]

    def execute(self, car_id: int, if_modified_since: Optional[datetime] = None) -> CommandResult:
        car = self.repository.get(car_id)
        if car is None:
            return _not_found(car_id)

        # HTTP dates have second precision
        last_modified = _as_utc(car.last_modified).replace(microsecond=0)
        if if_modified_since is not None and last_modified <= _as_utc(if_modified_since):
            return CommandResult(304)

        headers = {"Last-Modified": format_datetime(last_modified.astimezone(timezone.utc), usegmt=True)}
        profile = self.cache_profiles.value.get_profile(CAR_CACHE_PROFILE)
        if profile is not None:
            headers["Cache-Control"] = profile.to_cache_control()

        return CommandResult(200, self.car_translator.translate(car), headers)


@dataclass
class PostCarCommandHandler:
    """Create a car."""

    repository: CarRepository
    save_car_translator: Translator[SaveCarDTO, Car]
    car_translator: Translator[Car, CarDTO]

    def execute(self, save_car: SaveCarDTO) -> CommandResult:
        car = self.repository.add(self.save_car_translator.translate(save_car))
        dto = self.car_translator.translate(car)
        logger.info(f"Created car {car.car_id}")
        return CommandResult(201, dto, {"Location": dto.url or ""})


@dataclass
class PutCarCommandHandler:
    """Replace the editable fields of a car."""

    repository: CarRepository
    car_translator: Translator[Car, CarDTO]

    def execute(self, car_id: int, save_car: SaveCarDTO) -> CommandResult:
        car = self.repository.get(car_id)
        if car is None:
            return _not_found(car_id)

        car = replace(car, cylinders=save_car.cylinders, make=save_car.make, model=save_car.model)
        try:
            car = self.repository.update(car.touch())
        except KeyError:
            # deleted by a concurrent unit of work since it was read
            return _not_found(car_id)
        return CommandResult(200, self.car_translator.translate(car))


@dataclass
class PatchCarCommandHandler:
    """Apply a partial update to a car.

    ``changes`` is merged over the car's current editable fields and the
    result must still be a valid ``SaveCarDTO``.
    """

    repository: CarRepository
    to_save_car_translator: Translator[Car, SaveCarDTO]
    car_translator: Translator[Car, CarDTO]

    def execute(self, car_id: int, changes: Dict[str, Any]) -> CommandResult:
        car = self.repository.get(car_id)
        if car is None:
            return _not_found(car_id)

        current = self.to_save_car_translator.translate(car)
        try:
            patched = SaveCarDTO.model_validate({**current.model_dump(), **changes})
        except ValidationError as e:
            errors = [
                {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
                for error in e.errors()
            ]
            return CommandResult(400, {"errors": errors})

        car = replace(car, cylinders=patched.cylinders, make=patched.make, model=patched.model)
        try:
            car = self.repository.update(car.touch())
        except KeyError:
            # deleted by a concurrent unit of work since it was read
            return _not_found(car_id)
        return CommandResult(200, self.car_translator.translate(car))


@dataclass
class DeleteCarCommandHandler:
    """Delete a car."""

    repository: CarRepository

    def execute(self, car_id: int) -> CommandResult:
        if not self.repository.delete(car_id):
            return _not_found(car_id)
        logger.info(f"Deleted car {car_id}")
        return CommandResult(204)
