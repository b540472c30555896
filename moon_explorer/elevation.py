"""
Procedural lunar elevation.

The heightmap is a superposition of a highland base, a far side bias, polar
uplift, mare basins, crater rims/floors and a sine-hash noise texture. The
constants are tuned by eye against the renderer and are kept exactly as they
are so terrain, markers and trajectories agree with each other.

Elevations are stored in scene units (km * KM_TO_SCENE).
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from .constants import (
    GRID_LAT_RESOLUTION,
    KM_PER_DEG_CRATER,
    KM_TO_SCENE,
    MOON_RADIUS,
    TERRAIN_EXAGGERATION,
)
from .geomath import GeoPoint, clamp_latitude, great_circle_distance_deg, wrap_longitude

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class BasinFeature:
    center: GeoPoint
    angular_radius: float  # degrees


@dataclass(frozen=True)
class CraterFeature:
    center: GeoPoint
    angular_radius: float  # degrees
    diameter_km: Optional[float] = None

    @property
    def size_km(self) -> float:
        if self.diameter_km is not None:
            return float(self.diameter_km)
        return 2.0 * KM_PER_DEG_CRATER * self.angular_radius


def hash_noise(x: ArrayLike, y: ArrayLike) -> ArrayLike:
    """Sine-hash pseudo noise in [0, 1). Deterministic, not Perlin."""
    n = np.sin(x * 12.9898 + y * 78.233) * 43758.5453
    return n - np.floor(n)


class ElevationModel:
    """Point-wise elevation synthesis shared by the grid builder and tests."""

    def __init__(
        self,
        *,
        base_km: float = 2.0,
        far_side_km: float = 2.5,
        far_side_noise_km: float = 1.5,
        polar_start_deg: float = 60.0,
        polar_km: float = 2.5,
        mare_depth_km: float = 4.0,
        rim_km_per_km: float = 0.02 / 1000,
        floor_km_per_km: float = 0.1 / 1000,
        noise_km: float = 0.5,
        min_km: float = -8.0,
        max_km: float = 10.0,
        km_to_scene: float = KM_TO_SCENE,
    ):
        self.base_km = base_km
        self.far_side_km = far_side_km
        self.far_side_noise_km = far_side_noise_km
        self.polar_start_deg = polar_start_deg
        self.polar_km = polar_km
        self.mare_depth_km = mare_depth_km
        self.rim_km_per_km = rim_km_per_km
        self.floor_km_per_km = floor_km_per_km
        self.noise_km = noise_km
        self.min_km = min_km
        self.max_km = max_km
        self.km_to_scene = km_to_scene

        # Rim band and falloff are fractions of the crater radius.
        self.rim_inner = 0.7
        self.rim_outer = 1.3
        self.rim_width = 0.3
        self.influence = 2.0

        if self.min_km >= self.max_km:
            raise ValueError("min_km must be < max_km")
        if not (0.0 < self.polar_start_deg < 90.0):
            raise ValueError("polar_start_deg must be within (0, 90)")

    def elevation_km(
        self,
        lat: ArrayLike,
        lon: ArrayLike,
        basins: Iterable[BasinFeature] = (),
        craters: Iterable[CraterFeature] = (),
    ) -> np.ndarray:
        """Unclamped elevation in km."""
        lat = np.asarray(lat, dtype=float)
        lon = np.asarray(lon, dtype=float)
        elev = np.full(np.broadcast(lat, lon).shape, self.base_km, dtype=float)

        far = np.abs(lon) > 90.0
        elev += np.where(far, self.far_side_km + hash_noise(lat * 0.02, lon * 0.02) * self.far_side_noise_km, 0.0)

        polar = np.abs(lat) > self.polar_start_deg
        ramp = (np.abs(lat) - self.polar_start_deg) / (90.0 - self.polar_start_deg)
        elev += np.where(polar, ramp * self.polar_km, 0.0)

        for basin in basins:
            radius = float(basin.angular_radius)
            if radius <= 0.0:
                continue
            d = great_circle_distance_deg((lat, lon), basin.center)
            factor = 1.0 - d / radius
            elev -= np.where(d < radius, self.mare_depth_km * factor * factor, 0.0)

        for crater in craters:
            radius = float(crater.angular_radius)
            if radius <= 0.0:
                continue
            size = crater.size_km
            d = great_circle_distance_deg((lat, lon), crater.center)
            inside = d < radius * self.influence

            rim = inside & (d > radius * self.rim_inner) & (d < radius * self.rim_outer)
            rim_factor = np.exp(-(((d - radius) / (radius * self.rim_width)) ** 2))
            elev += np.where(rim, size * self.rim_km_per_km * rim_factor, 0.0)

            floor = inside & (d < radius * self.rim_inner)
            depth_factor = 1.0 - d / (radius * self.rim_inner)
            elev -= np.where(floor, size * self.floor_km_per_km * depth_factor, 0.0)

        elev += (hash_noise(lat * 0.05, lon * 0.05) - 0.5) * self.noise_km
        return elev

    def evaluate(
        self,
        lat: ArrayLike,
        lon: ArrayLike,
        basins: Iterable[BasinFeature] = (),
        craters: Iterable[CraterFeature] = (),
    ) -> ArrayLike:
        """Clamped elevation in scene units; scalars in, float out."""
        km = np.clip(self.elevation_km(lat, lon, basins, craters), self.min_km, self.max_km)
        scene = km * self.km_to_scene
        if scene.ndim == 0:
            return float(scene)
        return scene


class ElevationField:
    """Immutable lat/lon grid of elevations with bilinear sampling.

    Row i sits at lat = i / (rows - 1) * 180 - 90 and column j at
    lon = j / (cols - 1) * 360 - 180, so both poles and the seam are on the grid.
    """

    def __init__(self, values: np.ndarray, *, km_to_scene: float = KM_TO_SCENE):
        values = np.array(values, dtype=float)
        if values.ndim != 2 or values.shape[0] < 2 or values.shape[1] < 2:
            raise ValueError(f"Elevation grid must be 2D with at least 2x2 cells, got shape {values.shape}")
        values.setflags(write=False)
        self._values = values
        self.km_to_scene = km_to_scene

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def shape(self) -> Tuple[int, int]:
        return self._values.shape

    @property
    def lat_resolution(self) -> int:
        return self._values.shape[0]

    @property
    def lon_resolution(self) -> int:
        return self._values.shape[1]

    def lat_of(self, i: int) -> float:
        return (i / (self.lat_resolution - 1)) * 180.0 - 90.0

    def lon_of(self, j: int) -> float:
        return (j / (self.lon_resolution - 1)) * 360.0 - 180.0

    @staticmethod
    def _snap(f: float) -> float:
        r = round(f)
        return float(r) if abs(f - r) < 1e-9 else f

    def sample(self, lat: float, lon: float) -> float:
        rows, cols = self._values.shape
        lat = clamp_latitude(lat)
        lon = wrap_longitude(lon)

        fi = self._snap(((lat + 90.0) / 180.0) * (rows - 1))
        fj = self._snap(((lon + 180.0) / 360.0) * (cols - 1))

        i0 = max(0, min(rows - 1, math.floor(fi)))
        j0 = max(0, min(cols - 1, math.floor(fj)))
        i1 = min(rows - 1, i0 + 1)
        j1 = min(cols - 1, j0 + 1)

        fx = fi - i0
        fy = fj - j0

        data = self._values
        e00 = data[i0, j0]
        e10 = data[i1, j0]
        e01 = data[i0, j1]
        e11 = data[i1, j1]

        return float((1 - fx) * (1 - fy) * e00 + fx * (1 - fy) * e10 + (1 - fx) * fy * e01 + fx * fy * e11)

    def sample_km(self, lat: float, lon: float) -> float:
        return self.sample(lat, lon) / self.km_to_scene


def build_elevation_field(
    basins: Sequence[BasinFeature],
    craters: Sequence[CraterFeature],
    *,
    lat_resolution: int = GRID_LAT_RESOLUTION,
    lon_resolution: Optional[int] = None,
    model: Optional[ElevationModel] = None,
) -> ElevationField:
    if lon_resolution is None:
        lon_resolution = lat_resolution * 2
    if lat_resolution < 2 or lon_resolution < 2:
        raise ValueError(f"Grid resolution must be >= 2, got {lat_resolution}x{lon_resolution}")

    model = model or ElevationModel()
    basins = list(basins)
    craters = list(craters)
    skipped = sum(1 for f in basins + craters if f.angular_radius <= 0.0)
    if skipped:
        logger.debug("Ignoring %d features with non-positive radius", skipped)

    start = time.perf_counter()
    lat = (np.arange(lat_resolution) / (lat_resolution - 1)) * 180.0 - 90.0
    lon = (np.arange(lon_resolution) / (lon_resolution - 1)) * 360.0 - 180.0
    lat_grid, lon_grid = np.meshgrid(lat, lon, indexing="ij")

    values = np.array(model.evaluate(lat_grid, lon_grid, basins, craters), dtype=float)
    # +180 and -180 are the same meridian.
    values[:, -1] = values[:, 0]

    logger.info(
        "Built %dx%d elevation grid (%d basins, %d craters) in %.3fs",
        lat_resolution, lon_resolution, len(basins), len(craters), time.perf_counter() - start,
    )
    return ElevationField(values, km_to_scene=model.km_to_scene)


def build_catalog_field(maria=None, craters=None, **kwargs) -> ElevationField:
    """Elevation field from the static mare/crater catalog."""
    from . import catalog

    maria = catalog.MARIA if maria is None else maria
    craters = catalog.CRATERS if craters is None else craters
    return build_elevation_field(catalog.basin_features(maria), catalog.crater_features(craters), **kwargs)


def sample_or_zero(field: Optional[ElevationField], lat: float, lon: float) -> float:
    if field is None:
        return 0.0
    return field.sample(lat, lon)


def surface_radius(field: Optional[ElevationField], lat: float, lon: float) -> float:
    """Distance from the centre to the displaced terrain surface."""
    return MOON_RADIUS + sample_or_zero(field, lat, lon) * TERRAIN_EXAGGERATION
