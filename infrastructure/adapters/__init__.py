"""
Adapters package - Implementation of the hexagonal architecture adapters.

This package contains concrete implementations of the ports defined in
application.ports.
"""
