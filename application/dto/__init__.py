"""Data Transfer Objects for the application layer."""

from .car import CarDTO, SaveCarDTO

__all__ = ["CarDTO", "SaveCarDTO"]
