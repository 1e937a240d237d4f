"""Capture a photo or pick one from disk, then extract its printed text."""

__version__ = "0.1.0"
