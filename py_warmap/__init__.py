"""Hex war map geometry: coordinate normalization, classification and sector tessellation."""

__version__ = "0.1.0"
