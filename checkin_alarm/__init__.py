"""Tray utility showing full-screen check-in reminders at randomized times."""

__version__ = "1.0.0"
