"""Sensor-specific page parsers.

:mod:`weather_page` turns the HTML served by the environmental sensor into a
:class:`~weatherpoll.core.models.Reading`.
"""

from .weather_page import find_measurements, parse_readings

__all__ = ["find_measurements", "parse_readings"]
