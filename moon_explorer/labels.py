"""
Greedy label placement.

Each label tries a fixed, priority-ordered list of offsets from its anchor and
takes the first one that keeps `min_distance` from every label already placed
in the same pass. When all candidates collide the label is dropped at a
jittered spot above the anchor; that fallback may overlap. This is first-fit,
not an optimal packing.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .geomath import Vec3, v3_add, v3_dist

logger = logging.getLogger(__name__)

CANDIDATE_OFFSETS: Tuple[Tuple[str, Vec3], ...] = (
    ("above", (0.0, 12.0, 0.0)),
    ("upper_right", (20.0, 10.0, 0.0)),
    ("upper_left", (-20.0, 10.0, 0.0)),
    ("further_above", (0.0, 24.0, 0.0)),
    ("far_right", (35.0, 5.0, 0.0)),
    ("far_left", (-35.0, 5.0, 0.0)),
    ("higher_above", (0.0, 36.0, 0.0)),
    ("high_right", (25.0, 28.0, 0.0)),
)

MAX_LABEL_CHARS = 16


@dataclass(frozen=True)
class LabelPlacement:
    anchor: Vec3
    chosen: Vec3
    fallback: bool = False


def truncate_label(name: str) -> str:
    if len(name) > MAX_LABEL_CHARS:
        return name[:MAX_LABEL_CHARS - 2] + "…"
    return name


class LabelPlacer:
    def __init__(
        self,
        min_distance: float = 30.0,
        *,
        jitter: float = 25.0,
        lift: float = 20.0,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        if min_distance <= 0:
            raise ValueError("min_distance must be > 0")
        if jitter < 0:
            raise ValueError("jitter must be >= 0")
        self.min_distance = float(min_distance)
        self.jitter = float(jitter)
        self.lift = float(lift)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.last_was_fallback = False

    def _clear_of(self, candidate: Vec3, existing: Iterable[Vec3]) -> bool:
        return all(v3_dist(candidate, other) >= self.min_distance for other in existing)

    def candidates(self, anchor: Vec3) -> List[Vec3]:
        return [v3_add(anchor, offset) for _name, offset in CANDIDATE_OFFSETS]

    def place(self, anchor: Vec3, existing: Sequence[Vec3]) -> Vec3:
        existing = list(existing)
        for candidate in self.candidates(anchor):
            if self._clear_of(candidate, existing):
                self.last_was_fallback = False
                return candidate

        dx, dz = self.rng.uniform(-self.jitter, self.jitter, size=2)
        self.last_was_fallback = True
        logger.debug("No clear label slot near %s; using jittered fallback", anchor)
        return (anchor[0] + float(dx), anchor[1] + self.lift, anchor[2] + float(dz))

    def place_all(self, anchors: Iterable[Vec3]) -> List[LabelPlacement]:
        """One sequential pass; every decision sees all earlier placements."""
        chosen: List[Vec3] = []
        placements: List[LabelPlacement] = []
        for anchor in anchors:
            position = self.place(anchor, chosen)
            chosen.append(position)
            placements.append(LabelPlacement(anchor=anchor, chosen=position, fallback=self.last_was_fallback))

        fallbacks = sum(1 for p in placements if p.fallback)
        if fallbacks:
            logger.info("Placed %d labels (%d via fallback)", len(placements), fallbacks)
        return placements
