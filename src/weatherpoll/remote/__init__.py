"""Network access to the sensor.

:class:`HttpSampleSource` polls the sensor's web page over plain HTTP and
returns parsed readings to the acquisition loop.
"""

from .http_source import HttpSampleSource, endpoint_for

__all__ = ["HttpSampleSource", "endpoint_for"]
