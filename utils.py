from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np


@dataclass(frozen=True)
class Vector3:
    """Immutable 3-component vector. y is up, x and z span the ground plane."""

    x: float
    y: float
    z: float

    @staticmethod
    def zero() -> "Vector3":
        return Vector3(0.0, 0.0, 0.0)

    @staticmethod
    def from_array(a: Iterable[float]) -> "Vector3":
        arr = np.asarray(a, dtype=float).reshape(3)
        return Vector3(float(arr[0]), float(arr[1]), float(arr[2]))

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, k: float) -> "Vector3":
        k = float(k)
        return Vector3(self.x * k, self.y * k, self.z * k)

    __rmul__ = __mul__

    def __truediv__(self, k: float) -> "Vector3":
        k = float(k)
        return Vector3(self.x / k, self.y / k, self.z / k)

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance(self, other: "Vector3") -> float:
        return (other - self).length()

    def normalized(self, eps: float = 1e-12) -> "Vector3":
        n = self.length()
        if n < eps:
            return Vector3.zero()
        return self / n

    def flattened(self) -> "Vector3":
        return Vector3(self.x, 0.0, self.z)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)


UP = Vector3(0.0, 1.0, 0.0)
FORWARD = Vector3(0.0, 0.0, 1.0)
RIGHT = Vector3(1.0, 0.0, 0.0)


def clamp01(v: float) -> float:
    return min(1.0, max(0.0, float(v)))


def rot_x(angle_rad: float) -> np.ndarray:
    c = np.cos(angle_rad)
    s = np.sin(angle_rad)
    return np.array(
        [
            [1.0, 0.0, 0.0],
            [0.0, c, -s],
            [0.0, s, c],
        ],
        dtype=float,
    )


def rot_y(angle_rad: float) -> np.ndarray:
    c = np.cos(angle_rad)
    s = np.sin(angle_rad)
    return np.array(
        [
            [c, 0.0, s],
            [0.0, 1.0, 0.0],
            [-s, 0.0, c],
        ],
        dtype=float,
    )


def heading_rad(direction: Vector3) -> float:
    # measured from +z (FORWARD) toward +x
    return math.atan2(direction.x, direction.z)


def is_close(a: Vector3, b: Vector3, tol: float = 1e-6) -> bool:
    return a.distance(b) <= tol
