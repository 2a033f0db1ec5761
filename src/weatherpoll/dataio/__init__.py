"""Data output helpers (CSV dumps, PNG plots and file paths).

Utility modules here keep disk-level concerns isolated from the rest of the
application:
- :mod:`csv_writer` emits the per-run CSV.
- :mod:`plots` renders one static image per quantity with matplotlib.
- :mod:`file_paths` centralises the zone directory layout and file names.
- :mod:`exporter` runs all of the above once a run has stopped.
"""
