"""Appointment reminder dispatcher for the Telecare backend."""

__version__ = "1.0.0"
