"""
The sensor's web page prints its measurements as plain text, e.g.::

    Temperature: 23.5 deg  Pressure: 1013.2 Pa  Humidity: 45.0 rH

Every decimal number followed by a single space and one of the unit markers
``deg``, ``Pa`` or ``rH`` is a measurement. The first three matches, in page
order, are temperature, pressure and humidity.
"""

from __future__ import annotations

import logging
import re
from typing import List, Tuple

from ..core.models import Reading
from ..errors import ParseError

logger = logging.getLogger(__name__)

MEASUREMENT_RE = re.compile(r"(\d+\.\d+)\s(deg|Pa|rH)")

UNITS = ("deg", "Pa", "rH")


def find_measurements(text: str) -> List[Tuple[float, str]]:
    """Return every ``(value, unit)`` pair found in ``text`` in page order."""
    return [(float(m.group(1)), m.group(2)) for m in MEASUREMENT_RE.finditer(text)]


def parse_readings(text: str) -> Reading:
    """
    Extract a :class:`Reading` from the sensor page.

    Raises :class:`ParseError` when fewer than three measurements are present.
    """
    values = find_measurements(text)
    if len(values) < 3:
        raise ParseError(
            f"unable to extract data from the response ({len(values)} of 3 values found)"
        )
    if len(values) > 3:
        logger.debug("Ignoring %d extra measurements on sensor page", len(values) - 3)
    (temperature, _), (pressure, _), (humidity, _) = values[:3]
    return Reading(temperature=temperature, pressure=pressure, humidity=humidity)
