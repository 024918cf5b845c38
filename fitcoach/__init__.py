"""fitcoach: Python client for the AI fitness-coaching backend."""

__version__ = "0.1.0"
