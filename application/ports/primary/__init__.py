"""Primary ports for hexagonal architecture.

Primary ports (driving ports) are the APIs the application exposes to the
web layer and other external actors.
"""

from .car_commands import (
    CommandResult,
    DeleteCarCommand,
    GetCarCommand,
    PatchCarCommand,
    PostCarCommand,
    PutCarCommand,
)

__all__ = [
    "CommandResult",
    "GetCarCommand",
    "PostCarCommand",
    "PutCarCommand",
    "PatchCarCommand",
    "DeleteCarCommand",
]
