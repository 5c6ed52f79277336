"""Configuration management for pywise."""

from pywise.config.settings import ALGORITHMS, OUTPUT_FORMATS, GeneratorSettings, load_settings

__all__ = [
    "GeneratorSettings",
    "load_settings",
    "ALGORITHMS",
    "OUTPUT_FORMATS",
]
