"""
core/vector.py

Plane geometry for ants and their trails.

Headings are unit vectors, positions live in the unit square,
and every turn is a rotation.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union
import math

import numpy as np

FULL_TURN = 2 * math.pi


def _ieee_div(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 semantics: x/0 is inf or nan, never an exception."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(numerator) / np.float64(denominator))


@dataclass(frozen=True)
class Vector:
    """
    A 2-D vector of float64 components.

    Immutable value type: operations return new vectors.
    """
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_polar(cls, r: float, theta: float) -> Vector:
        return cls(r * math.cos(theta), r * math.sin(theta))

    @classmethod
    def from_angle(cls, theta: float) -> Vector:
        """Unit vector pointing at angle theta."""
        return cls(math.cos(theta), math.sin(theta))

    # ==================== Arithmetic ====================

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    def __mul__(self, other: Union[Vector, float]) -> Vector:
        """Component-wise product with a vector, or scaling by a float."""
        if isinstance(other, Vector):
            return Vector(self.x * other.x, self.y * other.y)
        return Vector(self.x * other, self.y * other)

    __rmul__ = __mul__

    def __truediv__(self, other: Union[Vector, float]) -> Vector:
        if isinstance(other, Vector):
            return Vector(_ieee_div(self.x, other.x), _ieee_div(self.y, other.y))
        return Vector(_ieee_div(self.x, other), _ieee_div(self.y, other))

    def add_scalar(self, value: float) -> Vector:
        return Vector(self.x + value, self.y + value)

    # ==================== Geometry ====================

    def angle(self) -> float:
        """Heading in (-pi, pi], via atan2."""
        return math.atan2(self.y, self.x)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> Vector:
        """Unit vector in the same direction. Non-finite for the zero vector."""
        return self / self.length()

    def rotated(self, theta: float) -> Vector:
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        return Vector(
            self.x * cos_t - self.y * sin_t,
            self.x * sin_t + self.y * cos_t,
        )

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)

    def __repr__(self) -> str:
        return f"Vector({self.x:.4f}, {self.y:.4f})"


def angle_diff(a: float, b: float) -> float:
    """
    Shortest signed rotation taking heading b to heading a.

    The raw difference a - b is shifted by one full turn only when it is
    strictly beyond +/-pi, so a difference of exactly pi comes back unchanged.
    """
    angle = a - b
    if angle > math.pi:
        angle -= FULL_TURN
    elif angle < -math.pi:
        angle += FULL_TURN
    return angle


def angle_diff_array(a: float, b: np.ndarray) -> np.ndarray:
    """angle_diff over an array of headings b, with the same strict boundary."""
    angle = a - np.asarray(b, dtype=np.float64)
    return np.where(
        angle > math.pi,
        angle - FULL_TURN,
        np.where(angle < -math.pi, angle + FULL_TURN, angle),
    )
