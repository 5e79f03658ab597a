from __future__ import annotations

import logging
import math
from typing import Optional

from config import (
    DEGENERATE_DISTANCE_M,
    FLATTEN_MAX_RANGE_M,
    FLATTEN_MIN_RANGE_M,
    LEVEL_BAND_M,
    MIN_ARC_HEIGHT_M,
)
from models import LaunchGeometry, LaunchSolution, OutOfRange, SolveOutcome
from utils import FORWARD, UP, Vector3, clamp01, heading_rad, rot_x, rot_y
from weapon import ARC_HEIGHT, FIXED_SPEED, ArcHeightProfile, FixedSpeedProfile, WeaponProfile

logger = logging.getLogger(__name__)


def solve(geometry: LaunchGeometry, profile: WeaponProfile, flatten_arc: bool = False) -> SolveOutcome:
    """Launch velocity and flight time taking a projectile from origin to target.

    Returns a LaunchSolution, or OutOfRange when the profile cannot reach the
    target. flatten_arc only affects arc-height profiles.
    """
    if isinstance(profile, ArcHeightProfile):
        return solve_arc_height(geometry, profile, flatten_arc=flatten_arc)
    if isinstance(profile, FixedSpeedProfile):
        return solve_fixed_speed(geometry, profile)
    raise TypeError(f"unsupported weapon profile {type(profile).__name__}")


# ---------------------------------------------------------------------------
# Arc-height mode
# ---------------------------------------------------------------------------

def flatten_arc_height(height: float, origin: Vector3, target: Vector3) -> float:
    """Scale the arc down for close targets. Never returns less than MIN_ARC_HEIGHT_M."""
    distance = origin.distance(target) - FLATTEN_MIN_RANGE_M
    percent = clamp01(distance / (FLATTEN_MAX_RANGE_M - FLATTEN_MIN_RANGE_M))
    return max(height * percent, MIN_ARC_HEIGHT_M)


def arc_height_for(geometry: LaunchGeometry, profile: ArcHeightProfile, flatten_arc: bool = False) -> float:
    h = profile.apex_height
    # flattening must run before the elevation correction
    if flatten_arc:
        h = flatten_arc_height(h, geometry.origin, geometry.target)
    # targets at or below the origin leave the apex untouched
    h += max(geometry.rise, 0.0)
    return h


def _launch(geometry: LaunchGeometry, velocity: Vector3, flight_time: float, mode: str, branch: str) -> SolveOutcome:
    # coordinates near the float limit overflow to inf/nan; report those as unreachable
    if not (velocity.is_finite() and math.isfinite(flight_time) and flight_time > 0.0):
        logger.debug("%s %s solve overflowed: v=%r t=%r", mode, branch, velocity, flight_time)
        return OutOfRange(reason=f"target out of range ({branch})", mode=mode)
    return LaunchSolution(
        initial_velocity=velocity,
        flight_time=flight_time,
        origin=geometry.origin,
        gravity=geometry.gravity,
    )


def solve_arc_height(geometry: LaunchGeometry, profile: ArcHeightProfile, flatten_arc: bool = False) -> SolveOutcome:
    """Never OutOfRange for representable geometry; the apex is raised until the shot works."""
    g = geometry.g
    dy = geometry.rise
    h = arc_height_for(geometry, profile, flatten_arc=flatten_arc)

    # v^2 = u^2 + 2as with zero vertical speed at the apex
    vy = math.sqrt(2.0 * g * h)
    t_up = math.sqrt(2.0 * h / g)
    t_down = math.sqrt(2.0 * (h - dy) / g)
    flight_time = t_up + t_down

    v_xz = geometry.horizontal_displacement / flight_time
    return _launch(geometry, v_xz + UP * vy, flight_time, ARC_HEIGHT, "arc")


# ---------------------------------------------------------------------------
# Fixed-speed mode
# ---------------------------------------------------------------------------

def max_level_range(initial_speed: float, g: float) -> float:
    """Farthest level target reachable at this speed (45 degree launch)."""
    return initial_speed * initial_speed / g


def solve_fixed_speed(geometry: LaunchGeometry, profile: FixedSpeedProfile) -> SolveOutcome:
    g = geometry.g
    v = profile.initial_speed
    d = geometry.horizontal_distance
    # positive when the target is below the origin
    dy = geometry.origin.y - geometry.target.y

    if d < DEGENERATE_DISTANCE_M:
        return _solve_vertical(geometry, v)

    if abs(dy) < LEVEL_BAND_M:
        branch = "level"
        angle = _level_angle(d, g, v)
    elif dy > 0.0:
        branch = "below"
        angle = _below_angle(d, dy, geometry.gravity.y, v)
    else:
        branch = "above"
        angle = _above_angle(d, -dy, g, v)

    if angle is None:
        logger.debug("fixed speed %.3f cannot reach %s target: d=%.3f dy=%.3f", v, branch, d, dy)
        return OutOfRange(reason=f"target out of range ({branch})", mode=FIXED_SPEED)

    velocity = _compose_velocity(v, angle, geometry.horizontal_displacement)
    return _launch(geometry, velocity, _flight_time(d, v, angle), FIXED_SPEED, branch)


def _level_angle(d: float, g: float, v: float) -> Optional[float]:
    # sin(2*angle) = g*d / v^2
    sin2 = d * g / (v * v)
    if not (-1.0 <= sin2 <= 1.0):
        return None
    # low arc; the high one is 90deg - angle
    return math.asin(sin2) / 2.0


def _below_angle(d: float, dy: float, gravity_y: float, v: float) -> Optional[float]:
    # R*cos(2a - phase) = -(2A + H) with signed gravity; a comes out as a depression angle
    phase = math.atan(-d / dy)
    a_term = (gravity_y * d * d) / (2.0 * v * v)
    cos_arg = (-2.0 * a_term - dy) / math.sqrt(d * d + dy * dy)
    if not (-1.0 <= cos_arg <= 1.0):
        return None
    depression = (math.acos(cos_arg) + phase) / 2.0
    return -depression


def _above_angle(d: float, rise: float, g: float, v: float) -> Optional[float]:
    # tmp*tan^2(a) - d*tan(a) + (rise + tmp) = 0
    tmp = (g / 2.0) * (d / v) * (d / v)
    a, b, c = tmp, d, rise + tmp
    disc = b * b - 4.0 * a * c
    if not disc >= 0.0:
        return None
    q = (b + math.sqrt(disc)) / 2.0
    # both roots are positive; shallower of the two keeps the low-arc family
    return min(math.atan(q / a), math.atan(c / q))


def _flight_time(d: float, v: float, angle: float) -> float:
    return d / (v * math.cos(angle))


def _compose_velocity(speed: float, elevation: float, direction: Vector3) -> Vector3:
    """Pitch a forward vector up by elevation, then turn it toward direction.

    Two separate rotations: pitch about the x axis fixes the vertical
    component, yaw about the y axis sets the heading.
    """
    base = FORWARD.to_array() * speed
    # rot_x with a positive angle pitches +z downward
    pitched = rot_x(-elevation) @ base
    aimed = rot_y(heading_rad(direction)) @ pitched
    return Vector3.from_array(aimed)


def _solve_vertical(geometry: LaunchGeometry, v: float) -> SolveOutcome:
    g = geometry.g
    rise = geometry.rise
    if rise > 0.0:
        disc = v * v - 2.0 * g * rise
        if not disc >= 0.0:
            logger.debug("fixed speed %.3f cannot climb %.3f straight up", v, rise)
            return OutOfRange(reason="target out of range (vertical)", mode=FIXED_SPEED)
        # first crossing of the target height, (v - sqrt(disc)) / g
        velocity = UP * v
        flight_time = 2.0 * rise / (v + math.sqrt(disc))
    elif rise < 0.0:
        velocity = UP * -v
        flight_time = -2.0 * rise / (v + math.sqrt(v * v - 2.0 * g * rise))
    else:
        # straight up and back down onto the origin
        velocity = UP * v
        flight_time = 2.0 * v / g
    return _launch(geometry, velocity, flight_time, FIXED_SPEED, "vertical")
