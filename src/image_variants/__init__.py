"""Resize uploaded images into a configured set of storage variants."""

__version__ = "0.1.0"
