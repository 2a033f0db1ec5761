"""Exception types shared across the acquisition pipeline."""

from __future__ import annotations


class WeatherPollError(Exception):
    """Base class for all errors raised by weatherpoll."""


class FetchError(WeatherPollError):
    """The sensor page could not be retrieved (network error or timeout)."""


class ParseError(WeatherPollError):
    """The sensor page did not contain three readable measurements."""


class ExportError(WeatherPollError):
    """An output file (CSV or image) could not be written."""


class BufferClosedError(WeatherPollError):
    """A sample was appended after acquisition stopped."""
