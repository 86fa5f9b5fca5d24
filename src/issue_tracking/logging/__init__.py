"""Structured logging utilities."""

from .audit import JsonlTrackingLogger, TrackingEvent, utc_timestamp

__all__ = ["JsonlTrackingLogger", "TrackingEvent", "utc_timestamp"]
