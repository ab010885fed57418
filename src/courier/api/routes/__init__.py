"""Route group exports."""

from . import deliveries, health, routes, waypoints

__all__ = ["waypoints", "routes", "health", "deliveries"]
