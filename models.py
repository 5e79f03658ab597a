from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Union

from utils import Vector3, heading_rad


class InvalidProfile(ValueError):
    """Weapon profile value outside its declared range."""


class InvalidGeometry(ValueError):
    """Launch geometry the solver cannot work with (bad gravity, non-finite points)."""


@dataclass(frozen=True)
class LaunchGeometry:
    origin: Vector3
    target: Vector3
    gravity: Vector3

    def __post_init__(self):
        for name in ("origin", "target", "gravity"):
            if not getattr(self, name).is_finite():
                raise InvalidGeometry(f"{name} must be finite, got {getattr(self, name)!r}")
        if not self.gravity.y < 0.0:
            raise InvalidGeometry(f"gravity must point down, got y={self.gravity.y!r}")
        if self.gravity.x != 0.0 or self.gravity.z != 0.0:
            raise InvalidGeometry("gravity must be vertical")

    @property
    def g(self) -> float:
        return abs(self.gravity.y)

    @property
    def rise(self) -> float:
        return self.target.y - self.origin.y

    @property
    def horizontal_displacement(self) -> Vector3:
        return (self.target - self.origin).flattened()

    @property
    def horizontal_distance(self) -> float:
        return self.origin.flattened().distance(self.target.flattened())

    @property
    def straight_distance(self) -> float:
        return self.origin.distance(self.target)


@dataclass(frozen=True)
class LaunchSolution:
    initial_velocity: Vector3
    flight_time: float
    origin: Vector3
    gravity: Vector3

    def __post_init__(self):
        if not (math.isfinite(self.flight_time) and self.flight_time > 0.0):
            raise ValueError(f"flight_time must be positive, got {self.flight_time!r}")
        if not self.initial_velocity.is_finite():
            raise ValueError(f"initial_velocity must be finite, got {self.initial_velocity!r}")

    def position_at(self, t: float) -> Vector3:
        # s = u*t + a*t^2/2
        return self.origin + self.initial_velocity * t + self.gravity * (0.5 * t * t)

    def velocity_at(self, t: float) -> Vector3:
        return self.initial_velocity + self.gravity * t

    def facing_at(self, t: float) -> Vector3:
        """Unit direction of travel; a projectile body is turned to this every physics step."""
        return self.velocity_at(t).normalized()

    @property
    def impact_point(self) -> Vector3:
        return self.position_at(self.flight_time)

    @property
    def launch_speed(self) -> float:
        return self.initial_velocity.length()

    @property
    def elevation_deg(self) -> float:
        v = self.initial_velocity
        return math.degrees(math.atan2(v.y, v.flattened().length()))

    @property
    def heading_deg(self) -> float:
        return math.degrees(heading_rad(self.initial_velocity))

    @property
    def apex_height(self) -> float:
        """Highest point above origin reached between launch and flight_time."""
        g = -self.gravity.y
        vy = self.initial_velocity.y
        if vy <= 0.0:
            return 0.0
        t_peak = vy / g
        if t_peak >= self.flight_time:
            return self.position_at(self.flight_time).y - self.origin.y
        return vy * vy / (2.0 * g)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial_velocity": list(self.initial_velocity.as_tuple()),
            "flight_time": self.flight_time,
            "origin": list(self.origin.as_tuple()),
            "gravity": list(self.gravity.as_tuple()),
            "launch_speed": self.launch_speed,
            "elevation_deg": self.elevation_deg,
            "heading_deg": self.heading_deg,
            "apex_height": self.apex_height,
            "impact_point": list(self.impact_point.as_tuple()),
        }


@dataclass(frozen=True)
class OutOfRange:
    reason: str
    mode: str = ""


SolveOutcome = Union[LaunchSolution, OutOfRange]


def is_out_of_range(outcome: SolveOutcome) -> bool:
    return isinstance(outcome, OutOfRange)
