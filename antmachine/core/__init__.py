"""
Core components of the ant machine.

- vector: plane geometry and angular differences
- pheromone: decaying scent marks
- ant: the steering rule
- locks: reader/writer discipline for the shared trail
"""

from .vector import Vector, angle_diff, angle_diff_array
from .pheromone import Pheromone, Trail, pheromone_arrays
from .ant import Ant, AntConfig
from .locks import ReadWriteLock

__all__ = [
    "Vector", "angle_diff", "angle_diff_array",
    "Pheromone", "Trail", "pheromone_arrays",
    "Ant", "AntConfig", "ReadWriteLock",
]
