"""Shared dataclasses for weatherpoll runs and samples."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional


@dataclass(frozen=True, slots=True)
class Reading:
    """One (temperature, pressure, humidity) triple scraped from the sensor page."""

    temperature: float
    pressure: float
    humidity: float


@dataclass(frozen=True, slots=True)
class Sample:
    time_index: int
    temperature: float
    pressure: float
    humidity: float

    @classmethod
    def from_reading(cls, time_index: int, reading: Reading) -> Sample:
        return cls(
            time_index=int(time_index),
            temperature=float(reading.temperature),
            pressure=float(reading.pressure),
            humidity=float(reading.humidity),
        )

    def as_row(self) -> tuple[int, float, float, float]:
        return (self.time_index, self.temperature, self.pressure, self.humidity)


@dataclass(frozen=True, slots=True)
class Quantity:
    """Plot metadata for one measured series."""

    key: str
    file_tag: str
    label: str
    color: str


TEMPERATURE = Quantity(key="temperature", file_tag="temp", label="Temperature", color="r")
PRESSURE = Quantity(key="pressure", file_tag="pressure", label="Pressure", color="b")
HUMIDITY = Quantity(key="humidity", file_tag="humidity", label="Humidity", color="g")

QUANTITIES: tuple[Quantity, ...] = (TEMPERATURE, PRESSURE, HUMIDITY)


@dataclass
class RunSession:
    zone: str
    output_directory: Path
    duration_limit: Optional[int] = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.created_at is None:
            self.created_at = datetime.now()
        self.output_directory = Path(self.output_directory)
