"""
core/pheromone.py

A scent mark left where an ant stood.

It starts strong and fades every tick until nothing is left.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple

import numpy as np

from .vector import Vector

DECAY = 0.1           # Power lost per tick
FULL_POWER = 1.0      # Power of a fresh deposit


@dataclass
class Pheromone:
    """
    A decaying marker at a position.

    Two pheromones at the same spot stay separate entries; they are never merged.
    """
    pos: Vector = field(default_factory=Vector)
    pow: float = FULL_POWER

    def evolve(self, decay: float = DECAY) -> None:
        """Fade by one tick. Whoever owns the collection prunes spent marks."""
        self.pow -= decay

    @property
    def spent(self) -> bool:
        """No power left. A NaN power counts as spent."""
        return not self.pow > 0

    def __add__(self, other: Pheromone) -> Pheromone:
        return Pheromone(pos=self.pos + other.pos, pow=self.pow + other.pow)


def pheromone_arrays(pheromones: Iterable[Pheromone]) -> Tuple[np.ndarray, np.ndarray]:
    """Positions as an (n, 2) array and powers as an (n,) array."""
    pheromones = list(pheromones)
    positions = np.array(
        [(p.pos.x, p.pos.y) for p in pheromones], dtype=np.float64
    ).reshape(-1, 2)
    powers = np.array([p.pow for p in pheromones], dtype=np.float64)
    return positions, powers


class Trail:
    """
    Array mirror of one tick's pheromones, for scanning.

    Holds the survivors of the last prune plus room for every deposit
    of the tick. Deposits fill the free rows in the order they are pushed;
    view() exposes only the filled rows.
    """

    def __init__(self, pheromones: Sequence[Pheromone], room: int):
        positions, powers = pheromone_arrays(pheromones)
        capacity = len(powers) + room

        self.positions = np.empty((capacity, 2), dtype=np.float64)
        self.powers = np.empty(capacity, dtype=np.float64)
        self.positions[:len(powers)] = positions
        self.powers[:len(powers)] = powers
        self.count = len(powers)

    def push(self, pheromone: Pheromone) -> None:
        if self.count >= len(self.powers):
            raise IndexError(f"Trail is full ({self.count} marks)")
        self.positions[self.count] = (pheromone.pos.x, pheromone.pos.y)
        self.powers[self.count] = pheromone.pow
        self.count += 1

    def view(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.positions[:self.count], self.powers[:self.count]

    def __len__(self) -> int:
        return self.count
