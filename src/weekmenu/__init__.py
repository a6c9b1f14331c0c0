"""Weekly canteen menu extraction and schedule queries."""

__version__ = "0.1.0"
