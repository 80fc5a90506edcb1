"""
core/ant.py

An ant is a point with a heading.

It does not know where it is going. It smells what lies ahead,
leans a little toward the strongest scent, stumbles a little at random,
and takes a step. The trail does the thinking.

Inspired by:
- Ant stigmergy (environment as memory)
- Proportional steering controllers
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple
import math

import numpy as np

from .pheromone import Pheromone, pheromone_arrays
from .vector import FULL_TURN, Vector, angle_diff, angle_diff_array


@dataclass
class AntConfig:
    """How every ant moves. Shared by the whole colony."""
    step: float = 0.0333          # Base displacement per tick
    steer_damping: float = 40.0   # Fraction of the heading error corrected per tick is 1/steer_damping
    noise: float = 0.125          # Heading jitter, uniform in [-noise, noise] radians
    heading_bias: float = 0.4     # Initial heading angle is (u - heading_bias) * 2pi
    speed_scale: float = 10.0     # Step is divided by sqrt(total_weight / speed_scale)


@dataclass
class Ant:
    """
    A steerable point agent.

    pos: where it stands, nominally inside the unit square
    dir: unit heading; only ever rotated, never renormalized
    """
    pos: Vector
    dir: Vector
    config: AntConfig = field(default_factory=AntConfig, repr=False, compare=False)

    @classmethod
    def random(cls, rng=None, config: Optional[AntConfig] = None) -> Ant:
        """Ant at a uniform position in the unit square with a biased random heading."""
        rng = rng if rng is not None else np.random
        config = config or AntConfig()
        pos = Vector(float(rng.random()), float(rng.random()))
        heading = (float(rng.random()) - config.heading_bias) * FULL_TURN
        return cls(pos=pos, dir=Vector.from_angle(heading), config=config)

    # ==================== Core Loop ====================

    def evolve(self, pheromones: Sequence[Pheromone], rng=None) -> None:
        """Advance one tick against a list of pheromones. See steer()."""
        positions, powers = pheromone_arrays(pheromones)
        self.steer(positions, powers, rng)

    def steer(self, positions: np.ndarray, powers: np.ndarray, rng=None) -> None:
        """
        Advance one tick against the pheromones as they stand right now.

        positions is an (n, 2) array of pheromone positions, powers the
        matching (n,) array of their powers.

        1. Weigh every other pheromone by power and by how nearly ahead it is
        2. Steer a damped step toward the weighted mean direction
        3. Jitter the heading
        4. Step forward, slower where the scent is dense
        5. Bounce once off the walls of the unit square
        """
        rng = rng if rng is not None else np.random

        self_angle = self.dir.angle()
        if self_angle > math.pi:
            # Unreachable through atan2
            self.dir = self.dir.rotated(-FULL_TURN)

        mean_angle, total_weight = self.sense(positions, powers, self_angle)

        if total_weight == 0:
            total_weight = 1.0

        if mean_angle != 0:
            self.dir = self.dir.rotated(
                angle_diff(mean_angle, self_angle) / self.config.steer_damping
            )

        noise = float(rng.uniform(-self.config.noise, self.config.noise))
        self.dir = self.dir.rotated(noise)

        displacement = self.config.step / math.sqrt(total_weight / self.config.speed_scale)
        self.pos = self.pos + self.dir * displacement

        if not self.in_bounds():
            self.dir = self.dir.rotated(math.pi)
            self.pos = self.pos + self.dir * displacement

    def sense(self, positions: np.ndarray, powers: np.ndarray,
              self_angle: float) -> Tuple[float, float]:
        """
        Weighted mean direction toward the pheromones.

        Returns (mean_angle, total_weight). Strong marks nearly dead ahead
        dominate; marks behind or beside the ant barely count. A mark at
        exactly the ant's own position is ignored.
        """
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
        powers = np.asarray(powers, dtype=np.float64)

        others = ~((positions[:, 0] == self.pos.x) & (positions[:, 1] == self.pos.y))
        offsets = positions[others] - (self.pos.x, self.pos.y)
        if len(offsets) == 0:
            return 0.0, 0.0

        angles = np.arctan2(offsets[:, 1], offsets[:, 0])
        diff = np.abs(angle_diff_array(self_angle, angles))
        diff[diff == 0] = 1.0

        weights = powers[others] * (2.0 / diff)
        total_weight = float(np.sum(weights * np.hypot(offsets[:, 0], offsets[:, 1])))
        mean = (weights[:, np.newaxis] * offsets).sum(axis=0)

        return math.atan2(mean[1], mean[0]), total_weight

    # ==================== Utilities ====================

    def in_bounds(self) -> bool:
        return 0.0 <= self.pos.x <= 1.0 and 0.0 <= self.pos.y <= 1.0

    def heading(self) -> float:
        return self.dir.angle()
