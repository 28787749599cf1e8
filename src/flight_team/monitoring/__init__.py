"""Monitoring package for console logging."""

from flight_team.monitoring.logger import configure_logger

__all__ = [
    "configure_logger",
]
