"""
antmachine/services/

Driving the simulation.

The runner owns the world, ticks it on its own thread, and lends
consistent snapshots to whoever wants to draw them.
"""

from .runner import RunnerConfig, SimulationRunner, main

__all__ = ["RunnerConfig", "SimulationRunner", "main"]
