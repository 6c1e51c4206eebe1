"""Configuration adapters."""

from streamflow_stations.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
