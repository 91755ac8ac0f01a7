"""Application commands - one handler per verb over the Car resource."""

from .car import (
    DeleteCarCommandHandler,
    GetCarCommandHandler,
    PatchCarCommandHandler,
    PostCarCommandHandler,
    PutCarCommandHandler,
)

__all__ = [
    "GetCarCommandHandler",
    "PostCarCommandHandler",
    "PutCarCommandHandler",
    "PatchCarCommandHandler",
    "DeleteCarCommandHandler",
]
