"""Configuration objects and helpers for lpsense.

A small YAML file (``lps.yaml``) describes where the sensor is attached and
how it should be sampled. :mod:`runtime` turns it into the typed
:class:`SensorConfig` used by the command-line reader.
"""

from .runtime import SensorConfig, config_from_mapping, load_config

__all__ = ["SensorConfig", "config_from_mapping", "load_config"]
