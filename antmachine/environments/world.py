"""
environments/world.py

The unit square, its ants, and the trail they leave.

One tick: old scent fades, every ant marks where it stands,
then reads the trail and moves on.

Inspired by:
- Ant colony foraging
- Data-parallel particle updates
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TypeVar
import logging

import numpy as np

from antmachine.core.ant import Ant, AntConfig
from antmachine.core.locks import ReadWriteLock
from antmachine.core.pheromone import DECAY, FULL_POWER, Pheromone, Trail, pheromone_arrays

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class WorldConfig:
    """Configuration for the world and its trail."""
    decay: float = DECAY                  # Power every pheromone loses per tick
    deposit_power: float = FULL_POWER     # Power of each fresh deposit
    ant: AntConfig = field(default_factory=AntConfig)


@dataclass
class WorldSnapshot:
    """
    A copy of everything a renderer needs, detached from the live world.
    """
    ant_positions: np.ndarray        # (n_ants, 2)
    ant_headings: np.ndarray         # (n_ants, 2)
    pheromone_positions: np.ndarray  # (n_pheromones, 2)
    pheromone_powers: np.ndarray     # (n_pheromones,)
    time: int = 0

    @property
    def num_ants(self) -> int:
        return len(self.ant_positions)

    @property
    def num_pheromones(self) -> int:
        return len(self.pheromone_powers)


def chunked(items: List[T], threads: int) -> List[List[T]]:
    """
    Split items into contiguous chunks of len(items) // threads (at least 1).

    The remainder spills into one extra chunk, so there can be threads + 1
    chunks. Chunks are slices, but the elements are the same objects.
    """
    if threads < 1:
        raise ValueError(f"threads must be at least 1, got {threads}")
    size = max(1, len(items) // threads)
    return [items[i:i + size] for i in range(0, len(items), size)]


class World:
    """
    Owns all ants and all pheromones and advances them one tick at a time.

    Features:
    - Sequential tick with strict ant ordering
    - Threaded tick over contiguous chunks
    - Detached snapshots for rendering

    The world never decides when to tick; its caller does.
    """

    def __init__(
        self,
        num_ants: int,
        config: Optional[WorldConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        if num_ants < 0:
            raise ValueError(f"num_ants must be non-negative, got {num_ants}")

        self.config = config or WorldConfig()
        # Unseeded by default; pass a seeded generator in tests
        self.rng = rng if rng is not None else np.random.default_rng()
        self.time = 0

        self.ants: List[Ant] = [
            Ant.random(self.rng, self.config.ant) for _ in range(num_ants)
        ]
        self.pheromones: List[Pheromone] = []

        self._pheromone_lock = ReadWriteLock()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_threads = 0

        logger.debug(f"World created with {num_ants} ants")

    # ==================== Ticks ====================

    def evolve(self) -> None:
        """
        Advance one tick sequentially.

        Later ants already see the deposits of earlier ants in the same tick.
        """
        self.time += 1

        for p in self.pheromones:
            p.evolve(self.config.decay)
        self._prune()
        trail = Trail(self.pheromones, room=len(self.ants))

        for ant in self.ants:
            deposit = self._deposit(ant)
            self.pheromones.append(deposit)
            trail.push(deposit)
            ant.steer(*trail.view(), self.rng)

    def evolve_threaded(self, threads: int) -> None:
        """
        Advance one tick with chunks of work spread over a thread pool.

        Each pheromone is decayed by exactly one chunk. Each ant appends its
        deposit under the write lock, then steers under the read lock; whether
        it sees deposits from other chunks in this tick depends on scheduling.
        """
        pheromone_chunks = chunked(self.pheromones, threads)
        ant_chunks = chunked(self.ants, threads)
        executor = self._pool(threads)

        self.time += 1

        # list() re-raises anything a worker raised
        list(executor.map(self._decay_chunk, pheromone_chunks))
        self._prune()
        trail = Trail(self.pheromones, room=len(self.ants))
        list(executor.map(lambda chunk: self._advance_chunk(chunk, trail), ant_chunks))

    def _decay_chunk(self, pheromones: Sequence[Pheromone]) -> None:
        for p in pheromones:
            p.evolve(self.config.decay)

    def _advance_chunk(self, ants: Sequence[Ant], trail: Trail) -> None:
        for ant in ants:
            deposit = self._deposit(ant)
            with self._pheromone_lock.write():
                self.pheromones.append(deposit)
                trail.push(deposit)
            with self._pheromone_lock.read():
                ant.steer(*trail.view(), self.rng)

    def _deposit(self, ant: Ant) -> Pheromone:
        return Pheromone(pos=ant.pos, pow=self.config.deposit_power)

    def _prune(self) -> None:
        """Drop spent pheromones, keeping creation order."""
        self.pheromones[:] = [p for p in self.pheromones if not p.spent]

    # ==================== Thread pool ====================

    def _pool(self, threads: int) -> ThreadPoolExecutor:
        if self._executor is None or self._executor_threads != threads:
            self.close()
            self._executor = ThreadPoolExecutor(
                max_workers=threads, thread_name_prefix="antmachine-world"
            )
            self._executor_threads = threads
            logger.debug(f"Thread pool sized to {threads} workers")
        return self._executor

    def close(self) -> None:
        """Release the thread pool, if any. The world stays usable."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            self._executor_threads = 0

    def __enter__(self) -> World:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ==================== Observation ====================

    def snapshot(self) -> WorldSnapshot:
        """Copy positions, headings and powers into arrays."""
        pheromone_positions, pheromone_powers = pheromone_arrays(self.pheromones)
        return WorldSnapshot(
            ant_positions=np.array(
                [(a.pos.x, a.pos.y) for a in self.ants], dtype=np.float64
            ).reshape(-1, 2),
            ant_headings=np.array(
                [(a.dir.x, a.dir.y) for a in self.ants], dtype=np.float64
            ).reshape(-1, 2),
            pheromone_positions=pheromone_positions,
            pheromone_powers=pheromone_powers,
            time=self.time,
        )

    def get_positions(self) -> np.ndarray:
        """Ant positions as an (n, 2) array."""
        return np.array(
            [(a.pos.x, a.pos.y) for a in self.ants], dtype=np.float64
        ).reshape(-1, 2)

    def __repr__(self) -> str:
        return (
            f"World(ants={len(self.ants)}, "
            f"pheromones={len(self.pheromones)}, "
            f"time={self.time})"
        )
