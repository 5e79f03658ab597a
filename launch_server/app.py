from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ballistics import sample
from config import MAX_SAMPLE_COUNT, ServiceConfig, load_config
from models import InvalidGeometry, InvalidProfile, LaunchGeometry, OutOfRange, SolveOutcome
from solver import solve
from utils import Vector3
from weapon import DEFAULT_WEAPON_CATALOG, WeaponProfile, profile_from_dict, profile_to_dict

logger = logging.getLogger(__name__)


class Vec3In(BaseModel):
    x: float
    y: float
    z: float

    def to_vector(self) -> Vector3:
        return Vector3(float(self.x), float(self.y), float(self.z))


class ProfileIn(BaseModel):
    kind: str
    value: float


class SolveIn(BaseModel):
    origin: Vec3In
    target: Vec3In
    gravity: Optional[Vec3In] = None
    profile: Optional[ProfileIn] = None
    weapon: Optional[str] = None
    flatten_arc: Optional[bool] = None


class TrajectoryIn(SolveIn):
    sample_count: Optional[int] = None


def _profile(data: SolveIn) -> WeaponProfile:
    if data.profile is not None:
        return profile_from_dict({"kind": data.profile.kind, "value": data.profile.value})
    if data.weapon:
        named = DEFAULT_WEAPON_CATALOG.get(data.weapon.strip().lower())
        if named is None:
            raise InvalidProfile(f"unknown weapon {data.weapon!r}")
        return named.profile
    raise InvalidProfile("either 'profile' or 'weapon' is required")


def _solve(data: SolveIn, cfg: ServiceConfig) -> SolveOutcome:
    gravity = data.gravity.to_vector() if data.gravity is not None else Vector3(0.0, cfg.gravity_y, 0.0)
    flatten = cfg.flatten_arc if data.flatten_arc is None else bool(data.flatten_arc)
    try:
        geometry = LaunchGeometry(origin=data.origin.to_vector(), target=data.target.to_vector(), gravity=gravity)
        profile = _profile(data)
    except (InvalidGeometry, InvalidProfile) as e:
        logger.warning("rejected solve request: %s", e)
        raise HTTPException(status_code=422, detail=str(e))
    return solve(geometry, profile, flatten_arc=flatten)


def _out_of_range(outcome: OutOfRange) -> Dict[str, Any]:
    return {"ok": False, "out_of_range": True, "reason": outcome.reason, "mode": outcome.mode}


def create_app(cfg: Optional[ServiceConfig] = None) -> FastAPI:
    cfg = cfg or load_config()
    app = FastAPI(title="Ballistic Launch Solver")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/ping")
    def api_ping():
        return {"ok": True}

    @app.get("/api/weapons")
    def api_weapons():
        return {
            "ok": True,
            "weapons": {
                key: {"name": w.name, **profile_to_dict(w.profile)}
                for key, w in DEFAULT_WEAPON_CATALOG.items()
            },
        }

    @app.post("/api/solve")
    def api_solve(data: SolveIn):
        outcome = _solve(data, cfg)
        if isinstance(outcome, OutOfRange):
            return _out_of_range(outcome)
        return {"ok": True, "solution": outcome.to_dict()}

    @app.post("/api/trajectory")
    def api_trajectory(data: TrajectoryIn):
        count = cfg.sample_count if data.sample_count is None else int(data.sample_count)
        if count < 1 or count > MAX_SAMPLE_COUNT:
            raise HTTPException(status_code=422, detail=f"sample_count must be in [1, {MAX_SAMPLE_COUNT}]")
        outcome = _solve(data, cfg)
        if isinstance(outcome, OutOfRange):
            return _out_of_range(outcome)
        points = sample(outcome, count)
        return {
            "ok": True,
            "solution": outcome.to_dict(),
            "points": [list(p.as_tuple()) for p in points],
        }

    return app


app = create_app()
