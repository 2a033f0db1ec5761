"""HTTP sample source: GET the sensor page and scrape one reading."""

from __future__ import annotations

import logging
import time
from typing import Optional

import requests

from ..core.models import Reading
from ..errors import FetchError
from ..sensors.weather_page import parse_readings
from ..tools.debug import time_block

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0

# Small reads keep a trickling server from holding one read past the deadline.
READ_CHUNK_BYTES = 1


def endpoint_for(address: str) -> str:
    """Build the sensor page URL for a bare host/IP address."""
    address = address.strip()
    if address.startswith(("http://", "https://")):
        return address
    return f"http://{address}"


class HttpSampleSource:
    """
    Fetch the sensor page with ``requests`` and parse it.

    Transport failures (connection errors, timeouts, HTTP error statuses) are
    raised as :class:`FetchError`; pages without three measurements raise
    :class:`~weatherpoll.errors.ParseError`. No retries are attempted.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint_for(endpoint)
        self.timeout_s = float(timeout_s)
        self._owns_session = session is None
        self._session = session or requests.Session()

    def fetch_text(self) -> str:
        """
        GET the page body as text.

        ``timeout_s`` bounds the whole request, body included: ``requests``
        only limits connect and per-read idle time, so the body is streamed
        and the elapsed time checked after every read.
        """
        deadline = time.monotonic() + self.timeout_s
        try:
            with time_block(f"GET {self.endpoint}"):
                with self._session.get(
                    self.endpoint, timeout=self.timeout_s, stream=True
                ) as response:
                    response.raise_for_status()
                    chunks = []
                    for chunk in response.iter_content(chunk_size=READ_CHUNK_BYTES):
                        if time.monotonic() > deadline:
                            raise FetchError(
                                f"timed out after {self.timeout_s:g} s: {self.endpoint}"
                            )
                        chunks.append(chunk)
                    encoding = response.encoding or "utf-8"
        except requests.Timeout as exc:
            raise FetchError(f"timed out after {self.timeout_s:g} s: {self.endpoint}") from exc
        except requests.RequestException as exc:
            raise FetchError(f"HTTP error from {self.endpoint}: {exc}") from exc
        body = b"".join(chunks)
        try:
            return body.decode(encoding, errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")

    def fetch(self) -> Reading:
        text = self.fetch_text()
        reading = parse_readings(text)
        logger.debug("Fetched %r from %s", reading, self.endpoint)
        return reading

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> HttpSampleSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
