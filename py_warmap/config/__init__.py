"""
Configuration for map geometry, the War API and the HTTP service.
"""

from .config import Settings, settings
from .hex_layout import HEX_LAYOUT, HexLayoutEntry

__all__ = ['Settings', 'settings', 'HEX_LAYOUT', 'HexLayoutEntry']
