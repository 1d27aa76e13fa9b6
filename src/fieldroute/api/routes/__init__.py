"""Route group exports."""

from . import customers, health, routes, saved_routes

__all__ = ["customers", "health", "routes", "saved_routes"]
