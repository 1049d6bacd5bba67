"""Configuration for raster topology analysis."""

from .topology_config import TopologyConfig

__all__ = ["TopologyConfig"]
