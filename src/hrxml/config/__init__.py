"""Configuration — package defaults and the layered config hierarchy."""

from hrxml.config.defaults import get_defaults
from hrxml.config.hierarchy import load_config_hierarchy

__all__ = ["get_defaults", "load_config_hierarchy"]
