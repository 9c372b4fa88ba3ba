"""Kiosk configuration: YAML file merged over the packaged config.yaml.example, plus env overrides."""

from kiosk.config.settings import get_readings_config, get_server_config, read_config

__all__ = ["read_config", "get_server_config", "get_readings_config"]
