"""Pin kiosk: serve sensor-pin frequency readings to a browser kiosk display."""
