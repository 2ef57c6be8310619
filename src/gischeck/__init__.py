"""gischeck: geodesy math and condition polling for Leaflet map tests."""

__version__ = "0.1.0"
