"""
Ant Machine: emergent trails from ants that follow their own scent

Ants wander the unit square, leave fading pheromones behind, and lean
toward the scent ahead of them. The colony's paths are nobody's plan.
"""

__version__ = "0.1.0"
