from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

Vec3 = Tuple[float, float, float]
ArrayLike = Union[float, np.ndarray]

DEG = math.pi / 180.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def v3_add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def v3_sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def v3_mul(a: Vec3, s: float) -> Vec3:
    s = float(s)
    return (a[0] * s, a[1] * s, a[2] * s)


def v3_cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def v3_len(a: Vec3) -> float:
    return math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def v3_dist(a: Vec3, b: Vec3) -> float:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    dz = a[2] - b[2]
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def v3_unit(a: Vec3, default: Vec3 = (0.0, 0.0, 1.0)) -> Vec3:
    n = v3_len(a)
    if n == 0:
        return default
    return (a[0] / n, a[1] / n, a[2] / n)


def v3_lerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )


def quadratic_bezier(p0: Vec3, c: Vec3, p2: Vec3, t: float) -> Vec3:
    u = 1.0 - t
    a = u * u
    b = 2.0 * u * t
    d = t * t
    return (
        a * p0[0] + b * c[0] + d * p2[0],
        a * p0[1] + b * c[1] + d * p2[1],
        a * p0[2] + b * c[2] + d * p2[2],
    )


def wrap_longitude(lon: float) -> float:
    """Wrap longitude to [-180, 180)."""
    return (float(lon) + 180.0) % 360.0 - 180.0


def clamp_latitude(lat: float) -> float:
    return max(-90.0, min(90.0, float(lat)))


def project(lat: float, lon: float, radius: float) -> Vec3:
    """Geographic coordinates to a point on a sphere of the given radius.

    Poles sit on +/-y and the +/-180 meridian on -x; lon = 0 points along +x.
    Artifact markers, terrain and trajectories all share this mapping.
    """
    phi = (90.0 - lat) * DEG
    theta = (lon + 180.0) * DEG

    x = -radius * math.sin(phi) * math.cos(theta)
    y = radius * math.cos(phi)
    z = radius * math.sin(phi) * math.sin(theta)
    return (x, y, z)


def project_many(lat: np.ndarray, lon: np.ndarray, radius: np.ndarray) -> np.ndarray:
    """Vectorised project(); returns an (..., 3) array."""
    phi = np.radians(90.0 - np.asarray(lat, dtype=float))
    theta = np.radians(np.asarray(lon, dtype=float) + 180.0)
    radius = np.asarray(radius, dtype=float)
    return np.stack(
        (
            -radius * np.sin(phi) * np.cos(theta),
            radius * np.cos(phi),
            radius * np.sin(phi) * np.sin(theta),
        ),
        axis=-1,
    )


def unproject(point: Vec3) -> GeoPoint:
    """Inverse of project(); the radius is discarded."""
    r = v3_len(point)
    if r == 0:
        return GeoPoint(0.0, 0.0)
    ratio = max(-1.0, min(1.0, point[1] / r))
    lat = math.asin(ratio) / DEG
    # project() puts x = r*sin(phi)*cos(lon) and z = -r*sin(phi)*sin(lon).
    lon = math.atan2(-point[2], point[0]) / DEG
    return GeoPoint(lat, lon)


LatLon = Union[GeoPoint, Tuple[ArrayLike, ArrayLike]]


def great_circle_distance_deg(a: LatLon, b: LatLon) -> ArrayLike:
    """Haversine distance between geographic points, in degrees of arc.

    Either side may carry numpy arrays of lat/lon; the result broadcasts.
    """
    lat1, lon1 = (a.lat, a.lon) if isinstance(a, GeoPoint) else a
    lat2, lon2 = (b.lat, b.lon) if isinstance(b, GeoPoint) else b
    lat1 = np.asarray(lat1, dtype=float)
    lat2 = np.asarray(lat2, dtype=float)

    d_lat = np.radians(lat2 - lat1)
    d_lon = np.radians(np.asarray(lon2, dtype=float) - np.asarray(lon1, dtype=float))
    h = np.sin(d_lat / 2) ** 2 + np.cos(np.radians(lat1)) * np.cos(np.radians(lat2)) * np.sin(d_lon / 2) ** 2
    d = np.degrees(2.0 * np.arctan2(np.sqrt(h), np.sqrt(np.maximum(0.0, 1.0 - h))))
    if d.ndim == 0:
        return float(d)
    return d
