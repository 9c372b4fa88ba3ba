"""Kiosk HTTP server: JSON pin API, health check, webhook acknowledgement, static kiosk page."""

from kiosk.status_server.app import create_app, run_server

__all__ = ["create_app", "run_server"]
