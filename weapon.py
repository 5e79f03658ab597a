from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from config import ARC_HEIGHT_MAX_M, SPEED_MAX_MPS, SPEED_MIN_MPS
from models import InvalidProfile

ARC_HEIGHT = "arc_height"
FIXED_SPEED = "fixed_speed"


def _number(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidProfile(f"{name} must be a number, got {value!r}")
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidProfile(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(v):
        raise InvalidProfile(f"{name} must be finite, got {value!r}")
    return v


@dataclass(frozen=True)
class ArcHeightProfile:
    """Apex height of the arc is fixed, launch speed follows from the geometry."""

    apex_height: float = 10.0

    def __post_init__(self):
        h = _number("apex_height", self.apex_height)
        # zero height would need an infinite launch speed
        if not (0.0 < h <= ARC_HEIGHT_MAX_M):
            raise InvalidProfile(f"apex_height must be in (0, {ARC_HEIGHT_MAX_M}], got {h}")
        object.__setattr__(self, "apex_height", h)

    @property
    def kind(self) -> str:
        return ARC_HEIGHT

    @property
    def value(self) -> float:
        return self.apex_height


@dataclass(frozen=True)
class FixedSpeedProfile:
    """Launch speed is fixed, the launch angle follows from the geometry."""

    initial_speed: float = 10.0

    def __post_init__(self):
        v = _number("initial_speed", self.initial_speed)
        if not (SPEED_MIN_MPS <= v <= SPEED_MAX_MPS):
            raise InvalidProfile(f"initial_speed must be in [{SPEED_MIN_MPS}, {SPEED_MAX_MPS}], got {v}")
        object.__setattr__(self, "initial_speed", v)

    @property
    def kind(self) -> str:
        return FIXED_SPEED

    @property
    def value(self) -> float:
        return self.initial_speed


WeaponProfile = Union[ArcHeightProfile, FixedSpeedProfile]


def profile_from_dict(raw: Mapping[str, Any]) -> WeaponProfile:
    kind = str(raw.get("kind", "")).strip().lower()
    if "value" not in raw:
        raise InvalidProfile("profile needs a 'value'")
    if kind == ARC_HEIGHT:
        return ArcHeightProfile(apex_height=raw["value"])
    if kind == FIXED_SPEED:
        return FixedSpeedProfile(initial_speed=raw["value"])
    raise InvalidProfile(f"unknown profile kind {kind!r}")


def profile_to_dict(profile: WeaponProfile) -> Dict[str, Any]:
    return {"kind": profile.kind, "value": profile.value}


@dataclass(frozen=True)
class NamedWeapon:
    name: str
    profile: WeaponProfile


DEFAULT_WEAPON_CATALOG: Dict[str, NamedWeapon] = {
    "shortbow": NamedWeapon(name="Shortbow", profile=ArcHeightProfile(apex_height=4.0)),
    "longbow": NamedWeapon(name="Longbow", profile=ArcHeightProfile(apex_height=10.0)),
    "mortar": NamedWeapon(name="Mortar", profile=ArcHeightProfile(apex_height=50.0)),
    "sling": NamedWeapon(name="Sling", profile=FixedSpeedProfile(initial_speed=10.0)),
    "crossbow": NamedWeapon(name="Crossbow", profile=FixedSpeedProfile(initial_speed=60.0)),
    "ballista": NamedWeapon(name="Ballista", profile=FixedSpeedProfile(initial_speed=120.0)),
}
