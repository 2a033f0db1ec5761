"""Poll a web-exposed weather sensor, plot it live and export the run.

The acquisition core (:mod:`weatherpoll.core`) is independent of Qt and HTTP;
the transport lives in :mod:`weatherpoll.remote`, page scraping in
:mod:`weatherpoll.sensors`, CSV/PNG output in :mod:`weatherpoll.dataio` and the
live window in :mod:`weatherpoll.gui`.
"""

__version__ = "0.1.0"
