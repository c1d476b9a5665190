"""Blink URL shortener backend."""

__version__ = "0.1.0"
