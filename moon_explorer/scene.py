"""
Renderer-facing scene data built from the catalog and an elevation field:
artifact markers with labels, resource rings, the displaced terrain mesh,
artifact filtering/search and camera focus paths.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np

from .catalog import ARTIFACTS, RESOURCE_COLORS, Artifact, Resource, status_color
from .colorizer import elevation_colors
from .constants import FOCUS_DISTANCE, KM_PER_DEG_CRATER, KM_TO_SCENE, MOON_RADIUS, TERRAIN_EXAGGERATION
from .elevation import ElevationField, sample_or_zero
from .geomath import Vec3, project, project_many, v3_lerp
from .labels import LabelPlacer, truncate_label

MARKER_HEIGHT = 12.0
RING_HEIGHT = 2.0
DEFAULT_RESOURCE_OPACITY = 0.7


@dataclass(frozen=True)
class ArtifactMarker:
    artifact: Artifact
    surface: Vec3
    position: Vec3
    color: int
    label: str
    label_position: Vec3
    label_fallback: bool


@dataclass(frozen=True)
class ResourceRing:
    resource: Resource
    points: List[Vec3]
    color: int
    opacity: float


@dataclass(frozen=True)
class TerrainMesh:
    vertices: np.ndarray  # (N, 3)
    colors: np.ndarray  # (N, 3) RGB in [0, 1]
    elevations: np.ndarray  # (N,) scene units
    faces: np.ndarray  # (M, 3) vertex indices


def displaced_radius(field: Optional[ElevationField], lat: float, lon: float, height: float = 0.0) -> float:
    return MOON_RADIUS + sample_or_zero(field, lat, lon) * TERRAIN_EXAGGERATION + height


def elevation_km(field: Optional[ElevationField], lat: float, lon: float) -> float:
    if field is None:
        return 0.0
    return field.sample_km(lat, lon)


def place_artifacts(
    artifacts: Iterable[Artifact],
    field: Optional[ElevationField],
    placer: Optional[LabelPlacer] = None,
) -> List[ArtifactMarker]:
    placer = placer or LabelPlacer(seed=0)
    artifacts = list(artifacts)

    surfaces: List[Vec3] = []
    positions: List[Vec3] = []
    for a in artifacts:
        surfaces.append(project(a.lat, a.lon, displaced_radius(field, a.lat, a.lon)))
        positions.append(project(a.lat, a.lon, displaced_radius(field, a.lat, a.lon, MARKER_HEIGHT)))

    placements = placer.place_all(positions)

    return [
        ArtifactMarker(
            artifact=a,
            surface=surface,
            position=position,
            color=status_color(a.status),
            label=truncate_label(a.name),
            label_position=placement.chosen,
            label_fallback=placement.fallback,
        )
        for a, surface, position, placement in zip(artifacts, surfaces, positions, placements)
    ]


def resource_ring(
    resource: Resource,
    field: Optional[ElevationField],
    segments: int = 32,
    opacity_scale: float = DEFAULT_RESOURCE_OPACITY,
) -> ResourceRing:
    if segments < 3:
        raise ValueError("segments must be >= 3")

    # Widen in longitude away from the equator; capped near the poles.
    radius_deg = resource.radius / KM_PER_DEG_CRATER / max(0.1, math.cos(math.radians(resource.lat)))
    points: List[Vec3] = []
    for i in range(segments + 1):
        angle = (i / segments) * math.pi * 2
        lat = resource.lat + radius_deg * math.sin(angle)
        lon = resource.lon + radius_deg * math.cos(angle)
        points.append(project(lat, lon, displaced_radius(field, lat, lon, RING_HEIGHT)))

    return ResourceRing(
        resource=resource,
        points=points,
        color=RESOURCE_COLORS.get(resource.type, 0xFFFFFF),
        opacity=resource.concentration * opacity_scale,
    )


def terrain_mesh(field: Optional[ElevationField], width_segments: int = 64, height_segments: int = 32) -> TerrainMesh:
    """UV sphere displaced by the elevation field, with banded vertex colours."""
    if width_segments < 3 or height_segments < 2:
        raise ValueError("terrain mesh needs width_segments >= 3 and height_segments >= 2")

    u = np.arange(width_segments + 1) / width_segments
    v = np.arange(height_segments + 1) / height_segments
    lat = 90.0 - v * 180.0
    lon = u * 360.0 - 180.0
    lat_grid, lon_grid = np.meshgrid(lat, lon, indexing="ij")

    elevations = np.array(
        [sample_or_zero(field, la, lo) for la, lo in zip(lat_grid.ravel(), lon_grid.ravel())],
        dtype=float,
    )
    radius = MOON_RADIUS + elevations * TERRAIN_EXAGGERATION
    vertices = project_many(lat_grid.ravel(), lon_grid.ravel(), radius)
    km_to_scene = field.km_to_scene if field is not None else KM_TO_SCENE
    colors = elevation_colors(elevations, km_to_scene)

    faces = []
    stride = width_segments + 1
    for iy in range(height_segments):
        for ix in range(width_segments):
            a = iy * stride + ix + 1
            b = iy * stride + ix
            c = (iy + 1) * stride + ix
            d = (iy + 1) * stride + ix + 1
            # Pole rows collapse to a single point; skip their degenerate halves.
            if iy != 0:
                faces.append((a, b, d))
            if iy != height_segments - 1:
                faces.append((b, c, d))

    return TerrainMesh(vertices=vertices, colors=colors, elevations=elevations, faces=np.array(faces, dtype=np.int32))


def origin_group(operator: str) -> str:
    if "Soviet" in operator or "Russia" in operator:
        return "soviet"
    if "United States" in operator:
        return "us"
    return "other"


def matches_origin(artifact: Artifact, *, soviet: bool = True, us: bool = True, other: bool = True) -> bool:
    return {"soviet": soviet, "us": us, "other": other}[origin_group(artifact.operator)]


def matches_search(artifact: Artifact, query: str) -> bool:
    query = (query or "").lower()
    return query == "" or query in artifact.name.lower() or query in str(artifact.year)


def filter_artifacts(
    artifacts: Iterable[Artifact] = ARTIFACTS,
    *,
    soviet: bool = True,
    us: bool = True,
    other: bool = True,
    query: str = "",
) -> List[Artifact]:
    return [
        a for a in artifacts
        if matches_origin(a, soviet=soviet, us=us, other=other) and matches_search(a, query)
    ]


def artifact_count_text(visible: int, total: int) -> str:
    return f"Showing {visible} of {total} artifacts"


def search_artifact(query: str, artifacts: Iterable[Artifact] = ARTIFACTS) -> Optional[Artifact]:
    """First artifact whose name or year contains the query."""
    query = (query or "").lower()
    for a in artifacts:
        if query in a.name.lower() or query in str(a.year):
            return a
    return None


def ease_out_quad(t: float) -> float:
    return t * (2 - t)


def camera_focus_path(start: Vec3, lat: float, lon: float, steps: int = 60, distance: float = FOCUS_DISTANCE) -> List[Vec3]:
    """Camera positions easing from `start` to a point above (lat, lon)."""
    if steps < 1:
        raise ValueError("steps must be >= 1")
    end = project(lat, lon, MOON_RADIUS + distance)
    return [v3_lerp(start, end, ease_out_quad(k / steps)) for k in range(steps + 1)]


def artifact_info(artifact: Artifact, field: Optional[ElevationField]) -> Dict:
    """Tooltip payload for one artifact."""
    return {
        "name": artifact.name,
        "year": artifact.year,
        "operator": artifact.operator,
        "type": artifact.type,
        "status": artifact.status,
        "lat": artifact.lat,
        "lon": artifact.lon,
        "elevation_km": round(elevation_km(field, artifact.lat, artifact.lon), 1),
        "description": artifact.description,
    }
