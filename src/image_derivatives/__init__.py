"""Derived images (reduced, resized, backed up) for uploaded objects."""

__version__ = "0.1.0"
