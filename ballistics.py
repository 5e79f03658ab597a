from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from models import LaunchSolution
from utils import Vector3


@dataclass
class Trajectory:
    t: np.ndarray
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray

    def points(self) -> List[Vector3]:
        return [Vector3(float(x), float(y), float(z)) for x, y, z in zip(self.x, self.y, self.z)]


def _check_count(sample_count: int) -> int:
    if isinstance(sample_count, bool) or int(sample_count) != sample_count:
        raise ValueError(f"sample_count must be an integer, got {sample_count!r}")
    n = int(sample_count)
    if n < 1:
        raise ValueError(f"sample_count must be >= 1, got {n}")
    return n


def sample(solution: LaunchSolution, sample_count: int) -> List[Vector3]:
    """sample_count + 1 positions from launch (t=0) to arrival (t=flight_time)."""
    n = _check_count(sample_count)
    out = []
    for i in range(n + 1):
        t = (i / n) * solution.flight_time
        out.append(solution.position_at(t))
    return out


def sample_trajectory(solution: LaunchSolution, sample_count: int) -> Trajectory:
    n = _check_count(sample_count)
    t = (np.arange(n + 1, dtype=float) / n) * solution.flight_time
    p0 = solution.origin.to_array()
    v0 = solution.initial_velocity.to_array()
    a = solution.gravity.to_array()
    # p(t) = p0 + v0*t + a*t^2/2
    pos = p0[None, :] + v0[None, :] * t[:, None] + 0.5 * a[None, :] * (t * t)[:, None]
    return Trajectory(t=t, x=pos[:, 0], y=pos[:, 1], z=pos[:, 2])


def closest_approach(tr: Trajectory, target: Vector3) -> Tuple[Vector3, float]:
    dx = tr.x - target.x; dy = tr.y - target.y; dz = tr.z - target.z
    d2 = dx*dx + dy*dy + dz*dz
    idx = int(np.argmin(d2))
    return Vector3(float(tr.x[idx]), float(tr.y[idx]), float(tr.z[idx])), float(math.sqrt(float(d2[idx])))


def apex_index(tr: Trajectory) -> int:
    return int(np.argmax(tr.y))
