"""MediBook appointment lifecycle and notification dispatch engine."""

__version__ = "1.0.0"
