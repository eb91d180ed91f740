"""Pixel-buffer image tools: background removal, filters, geometry, compression."""

__version__ = "1.0.0"
