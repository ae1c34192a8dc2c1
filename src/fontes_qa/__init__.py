"""Grounded question answering over a fixed corpus of official sources."""

__version__ = "0.1.0"
