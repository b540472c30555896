"""
Stylised mission trajectories.

Paths are visual, not simulated: Bezier legs from a fixed Earth point, a
constant-altitude parking orbit and a bulged descent. Every point of a
descent-bearing path is kept at least `clearance` above the displaced terrain.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from .constants import EARTH_POSITION, MOON_RADIUS
from .elevation import ElevationField, surface_radius
from .geomath import (
    Vec3,
    project,
    quadratic_bezier,
    unproject,
    v3_add,
    v3_cross,
    v3_dist,
    v3_len,
    v3_lerp,
    v3_mul,
    v3_sub,
    v3_unit,
    wrap_longitude,
)

logger = logging.getLogger(__name__)

DEFAULT_TANGENT: Vec3 = (0.0, 0.0, 1.0)


class Mission(Protocol):
    lat: float
    lon: float
    status: str
    type: str


class MissionProfile(Enum):
    STEADY_ORBIT = "steady_orbit"
    ORBITER_DESCENT = "orbiter_descent"
    DIRECT_ARC = "direct_arc"


def classify_profile(status: str, mission_type: str) -> MissionProfile:
    status = (status or "").strip().lower()
    mission_type = (mission_type or "").strip().lower()
    if status == "orbiting":
        return MissionProfile.STEADY_ORBIT
    if "orbit" in mission_type:
        return MissionProfile.ORBITER_DESCENT
    return MissionProfile.DIRECT_ARC


TRAJECTORY_COLORS: Dict[str, int] = {
    "landed": 0x66FF66,
    "crashed": 0xFFEE55,
    "impactor": 0xFF3366,
    "orbiting": 0x00FFFF,
}
DEFAULT_TRAJECTORY_COLOR = 0xAAAAAA


def trajectory_color(status: str) -> int:
    return TRAJECTORY_COLORS.get((status or "").strip().lower(), DEFAULT_TRAJECTORY_COLOR)


@dataclass(frozen=True)
class Trajectory:
    points: List[Vec3]
    color: int
    profile: MissionProfile


@dataclass(frozen=True)
class Cursor:
    position: Vec3
    tangent: Vec3


@dataclass(frozen=True)
class ClearanceReport:
    min_margin: float
    index: int
    point: Optional[Vec3]


@dataclass
class TrajectorySession:
    """Per-selection animation state, advanced once per rendered frame."""

    points: List[Vec3] = dc_field(default_factory=list)
    color: int = DEFAULT_TRAJECTORY_COLOR
    progress: float = 0.0
    speed: float = 1.0 / 8000.0  # progress per ms (one loop every 8 s)

    @property
    def active(self) -> bool:
        return bool(self.points)

    def clear(self) -> None:
        self.points = []
        self.progress = 0.0


def advance(session: TrajectorySession, dt_ms: float) -> Optional[Cursor]:
    """Move the cursor along the session path; no-op on a cleared session."""
    points = session.points
    if not points:
        return None

    session.progress += max(0.0, float(dt_ms)) * session.speed
    if session.progress > 1.0:
        session.progress = 0.0

    n = len(points)
    if n == 1:
        return Cursor(points[0], DEFAULT_TANGENT)

    f = session.progress * (n - 1)
    i = min(int(f), n - 2)
    a = points[i]
    b = points[i + 1]
    return Cursor(v3_lerp(a, b, f - i), v3_unit(v3_sub(b, a), default=DEFAULT_TANGENT))


def clearance_report(points: List[Vec3], field: Optional[ElevationField], clearance: float = 0.0) -> ClearanceReport:
    """Smallest radial margin above terrain + clearance along a path."""
    best = float("inf")
    best_index = -1
    for i, p in enumerate(points):
        geo = unproject(p)
        margin = v3_len(p) - (surface_radius(field, geo.lat, geo.lon) + clearance)
        if margin < best:
            best = margin
            best_index = i
    return ClearanceReport(best, best_index, points[best_index] if best_index >= 0 else None)


class TrajectorySynthesizer:
    def __init__(
        self,
        *,
        earth_position: Vec3 = EARTH_POSITION,
        orbit_altitude: float = 60.0,
        clearance: float = 3.0,
        orbit_segments: int = 128,
        approach_segments: int = 48,
        sweep_segments: int = 64,
        descent_segments: int = 40,
        arc_segments: int = 80,
        approach_lift: float = 0.8,
        arc_lift: float = 0.5,
        descent_bulge: float = 0.35,
        orbit_flattening: float = 0.92,
        wobble_amplitude: float = 8.0,
        wobble_cycles: int = 3,
        session_speed: float = 1.0 / 8000.0,
    ):
        self.earth_position = tuple(float(c) for c in earth_position)
        self.orbit_altitude = float(orbit_altitude)
        self.clearance = float(clearance)

        self.orbit_segments = int(orbit_segments)
        self.approach_segments = int(approach_segments)
        self.sweep_segments = int(sweep_segments)
        self.descent_segments = int(descent_segments)
        self.arc_segments = int(arc_segments)

        self.approach_lift = float(approach_lift)
        self.arc_lift = float(arc_lift)
        self.descent_bulge = float(descent_bulge)
        self.orbit_flattening = float(orbit_flattening)
        self.wobble_amplitude = float(wobble_amplitude)
        self.wobble_cycles = int(wobble_cycles)
        self.session_speed = float(session_speed)

        if self.clearance < 0.0:
            raise ValueError("clearance must be >= 0")
        if self.orbit_altitude <= self.clearance:
            raise ValueError("orbit_altitude must be > clearance")
        for name in ("orbit_segments", "approach_segments", "sweep_segments", "descent_segments", "arc_segments"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        if v3_len(self.earth_position) <= MOON_RADIUS + self.orbit_altitude:
            raise ValueError("earth_position must lie outside the parking orbit")

        self._builders: Dict[MissionProfile, Callable[[float, float, Optional[ElevationField]], List[Vec3]]] = {
            MissionProfile.STEADY_ORBIT: self._steady_orbit,
            MissionProfile.ORBITER_DESCENT: self._orbiter_descent,
            MissionProfile.DIRECT_ARC: self._direct_arc,
        }

    @staticmethod
    def _wrap_to_pi(angle_rad: float) -> float:
        """Wrap angle to (-pi, pi]."""
        wrapped = (angle_rad + math.pi) % (2 * math.pi) - math.pi
        return wrapped if wrapped != -math.pi else math.pi

    @property
    def orbit_radius(self) -> float:
        return MOON_RADIUS + self.orbit_altitude

    def landing_point(self, lat: float, lon: float, field: Optional[ElevationField]) -> Vec3:
        return project(lat, lon, surface_radius(field, lat, lon) + self.clearance)

    def _bezier(self, p0: Vec3, p2: Vec3, lift: float, segments: int) -> List[Vec3]:
        chord = v3_dist(p0, p2)
        control = v3_add(v3_lerp(p0, p2, 0.5), (0.0, lift * chord, 0.0))
        return [quadratic_bezier(p0, control, p2, k / segments) for k in range(segments + 1)]

    def _enforce_clearance(self, points: List[Vec3], field: Optional[ElevationField]) -> List[Vec3]:
        out: List[Vec3] = []
        clamped = 0
        for p in points:
            geo = unproject(p)
            min_r = surface_radius(field, geo.lat, geo.lon) + self.clearance
            if v3_len(p) < min_r:
                p = v3_mul(v3_unit(p, default=(0.0, 1.0, 0.0)), min_r)
                clamped += 1
            out.append(p)
        if clamped:
            logger.debug("Pushed %d of %d trajectory points out to the clearance shell", clamped, len(points))
        return out

    def _steady_orbit(self, lat: float, lon: float, field: Optional[ElevationField]) -> List[Vec3]:
        # Orbit plane contains the mission's surface direction.
        u = project(lat, lon, 1.0)
        normal = v3_cross(u, (0.0, 1.0, 0.0))
        if v3_len(normal) < 1e-9:
            normal = (1.0, 0.0, 0.0)
        normal = v3_unit(normal)
        w = v3_cross(normal, u)

        a = self.orbit_radius
        b = self.orbit_radius * self.orbit_flattening
        n = self.orbit_segments

        points: List[Vec3] = []
        for k in range(n + 1):
            t = 2.0 * math.pi * k / n
            p = v3_add(v3_mul(u, a * math.cos(t)), v3_mul(w, b * math.sin(t)))
            p = v3_add(p, v3_mul(normal, self.wobble_amplitude * math.sin(self.wobble_cycles * t)))
            points.append(p)
        return points

    def _orbiter_descent(self, lat: float, lon: float, field: Optional[ElevationField]) -> List[Vec3]:
        r_orbit = self.orbit_radius

        # Approach: Earth -> insertion point on the far side of the landing longitude.
        insertion_lon = wrap_longitude(lon + 180.0)
        insertion = project(0.0, insertion_lon, r_orbit)
        points = self._bezier(self.earth_position, insertion, self.approach_lift, self.approach_segments)

        # Parking orbit: shorter arc towards 90 deg before the landing longitude,
        # tilting from the equator to the landing latitude.
        start = math.radians(insertion_lon)
        span = self._wrap_to_pi(math.radians(lon - 90.0) - start)
        for k in range(1, self.sweep_segments + 1):
            s = k / self.sweep_segments
            points.append(project(lat * s, math.degrees(start + span * s), r_orbit))

        # Descent: chord with an outward parabolic bulge, zero at both ends.
        top = points[-1]
        landing = self.landing_point(lat, lon, field)
        bulge = self.descent_bulge * v3_dist(top, landing)
        for k in range(1, self.descent_segments + 1):
            s = k / self.descent_segments
            base = v3_lerp(top, landing, s)
            lift = 4.0 * s * (1.0 - s) * bulge
            points.append(v3_add(base, v3_mul(v3_unit(base), lift)))

        return self._enforce_clearance(points, field)

    def _direct_arc(self, lat: float, lon: float, field: Optional[ElevationField]) -> List[Vec3]:
        landing = self.landing_point(lat, lon, field)
        points = self._bezier(self.earth_position, landing, self.arc_lift, self.arc_segments)
        return self._enforce_clearance(points, field)

    def build(self, mission: Mission, field: Optional[ElevationField] = None) -> Trajectory:
        """Fresh point sequence for a mission; field=None means flat terrain."""
        profile = classify_profile(mission.status, mission.type)
        points = self._builders[profile](float(mission.lat), float(mission.lon), field)
        logger.debug("Built %s trajectory with %d points", profile.value, len(points))
        return Trajectory(points=points, color=trajectory_color(mission.status), profile=profile)

    def start_session(self, mission: Mission, field: Optional[ElevationField] = None) -> TrajectorySession:
        trajectory = self.build(mission, field)
        return TrajectorySession(points=list(trajectory.points), color=trajectory.color, speed=self.session_speed)

    def profile_segments(self, profile: MissionProfile) -> Tuple[int, ...]:
        """Point counts per leg, in path order."""
        if profile is MissionProfile.STEADY_ORBIT:
            return (self.orbit_segments + 1,)
        if profile is MissionProfile.ORBITER_DESCENT:
            return (self.approach_segments + 1, self.sweep_segments, self.descent_segments)
        return (self.arc_segments + 1,)
