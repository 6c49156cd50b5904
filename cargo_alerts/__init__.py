"""Notification and scheduled-alert engine for the cargo workforce dashboard."""

__version__ = "0.1.0"
