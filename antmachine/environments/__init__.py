"""
Environments the colony lives in.
"""

from .world import World, WorldConfig, WorldSnapshot, chunked

__all__ = ["World", "WorldConfig", "WorldSnapshot", "chunked"]
