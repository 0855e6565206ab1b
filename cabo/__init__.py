"""Cabo: rules engine for a hidden-information card game."""

__version__ = "0.1.0"
