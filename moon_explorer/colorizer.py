from typing import Tuple

import numpy as np

from .constants import KM_TO_SCENE

# (upper bound in km, colour); the last band is open-ended.
ELEVATION_BANDS: Tuple[Tuple[float, int], ...] = (
    (-6.0, 0x1E2840),
    (-4.0, 0x323C50),
    (-2.0, 0x46505F),
    (0.0, 0x5A5F69),
    (2.0, 0x73787D),
    (4.0, 0x878782),
    (6.0, 0x918C82),
)
HIGHEST_BAND_COLOR = 0xA59F91


def elevation_color(elev: float, km_to_scene: float = KM_TO_SCENE) -> int:
    """Discrete terrain colour for an elevation in scene units."""
    elev_km = elev / km_to_scene
    for bound, color in ELEVATION_BANDS:
        if elev_km < bound:
            return color
    return HIGHEST_BAND_COLOR


def hex_to_rgb(color: int) -> Tuple[float, float, float]:
    return (
        ((color >> 16) & 0xFF) / 255.0,
        ((color >> 8) & 0xFF) / 255.0,
        (color & 0xFF) / 255.0,
    )


def elevation_colors(elevations: np.ndarray, km_to_scene: float = KM_TO_SCENE) -> np.ndarray:
    """(N, 3) float RGB array for a flat array of elevations."""
    elev_km = np.asarray(elevations, dtype=float).ravel() / km_to_scene
    bounds = np.array([b for b, _ in ELEVATION_BANDS])
    palette = np.array([hex_to_rgb(c) for _, c in ELEVATION_BANDS] + [hex_to_rgb(HIGHEST_BAND_COLOR)])
    # side="right" keeps the strict "<" comparison of elevation_color().
    return palette[np.searchsorted(bounds, elev_km, side="right")]
