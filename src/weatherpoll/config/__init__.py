"""Configuration objects and helpers for weatherpoll.

:mod:`runtime` holds :class:`PollerConfig`, the few tuning constants of the
acquisition loop and exporters, optionally loaded from a YAML file passed
with ``--config``.
"""

from .runtime import PollerConfig, config_from_mapping, load_config

__all__ = ["PollerConfig", "config_from_mapping", "load_config"]
