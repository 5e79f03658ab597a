from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Callable, TypeVar

G = 9.81

# Arc flattening: closer than MIN gives an almost straight shot, beyond MAX the full arc.
FLATTEN_MIN_RANGE_M = 2.0
FLATTEN_MAX_RANGE_M = 50.0
MIN_ARC_HEIGHT_M = 0.1

ARC_HEIGHT_MAX_M = 50.0
SPEED_MIN_MPS = 10.0
SPEED_MAX_MPS = 500.0

LEVEL_BAND_M = 0.1
DEGENERATE_DISTANCE_M = 1e-6

DEFAULT_SAMPLE_COUNT = 30
MAX_SAMPLE_COUNT = 10000

ENV_PREFIX = "LAUNCH_"

T = TypeVar("T")

_TRUE = frozenset(("1", "true", "yes", "y", "on"))
_FALSE = frozenset(("0", "false", "no", "n", "off"))


def _flag(raw: str) -> bool:
    word = raw.strip().lower()
    if word in _TRUE:
        return True
    if word in _FALSE:
        return False
    raise ValueError(f"not a boolean flag: {raw!r}")


def _downward(raw: str) -> float:
    g = float(raw)
    # solver geometry only accepts gravity pointing straight down
    if not (math.isfinite(g) and g < 0.0):
        raise ValueError(f"gravity must be negative and finite, got {raw!r}")
    return g


def _env(key: str, default: T, parse: Callable[[str], T]) -> T:
    """LAUNCH_<key> parsed with parse; unset, blank or unparseable gives default."""
    raw = os.environ.get(ENV_PREFIX + key, "").strip()
    if not raw:
        return default
    try:
        return parse(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class ServiceConfig:
    host: str
    port: int
    gravity_y: float
    flatten_arc: bool
    sample_count: int
    log_level: str
    crash_log: str


def load_config() -> ServiceConfig:
    return ServiceConfig(
        host=_env("HOST", "127.0.0.1", str),
        port=_env("PORT", 8000, int),
        gravity_y=_env("GRAVITY_Y", -G, _downward),
        flatten_arc=_env("FLATTEN_ARC", False, _flag),
        sample_count=_env("SAMPLE_COUNT", DEFAULT_SAMPLE_COUNT, int),
        log_level=_env("LOG_LEVEL", "INFO", str.upper),
        crash_log=_env("CRASH_LOG", "crash_log.txt", str),
    )
