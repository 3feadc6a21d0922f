"""Momentum: setup wizard and lifecycle controller for the remote bridge."""

__version__ = "1.0.0"
