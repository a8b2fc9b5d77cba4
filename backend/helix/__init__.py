"""Helix: typed, validated settings over a site's options table."""

__version__ = "1.0.0"
