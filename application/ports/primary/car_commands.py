"""Primary car command ports.

One capability per verb over the Car resource. The web layer resolves these
from the request scope and turns the returned ``CommandResult`` into a
response.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from application.dto import SaveCarDTO


@dataclass
class CommandResult:
    """Outcome of a command: HTTP-style status, optional body and headers."""

    status_code: int
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class GetCarCommand(Protocol):
    def execute(self, car_id: int, if_modified_since: Optional[datetime] = None) -> CommandResult:
        ...


@runtime_checkable
class PostCarCommand(Protocol):
    def execute(self, save_car: SaveCarDTO) -> CommandResult:
        ...


@runtime_checkable
class PutCarCommand(Protocol):
    def execute(self, car_id: int, save_car: SaveCarDTO) -> CommandResult:
        ...


@runtime_checkable
class PatchCarCommand(Protocol):
    def execute(self, car_id: int, changes: Dict[str, Any]) -> CommandResult:
        ...


@runtime_checkable
class DeleteCarCommand(Protocol):
    def execute(self, car_id: int) -> CommandResult:
        ...
