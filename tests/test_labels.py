"""
Greedy label placement.

Placements that did not fall back must keep min_distance from every label
placed earlier in the same pass.
"""

import pytest
from numpy.testing import assert_allclose

from moon_explorer.geomath import v3_dist
from moon_explorer.labels import (
    CANDIDATE_OFFSETS,
    MAX_LABEL_CHARS,
    LabelPlacer,
    truncate_label,
)


@pytest.fixture
def placer():
    return LabelPlacer(min_distance=30.0, seed=7)


class TestPlace:

    def test_first_label_goes_above(self, placer):
        assert placer.place((10.0, 0.0, -5.0), []) == (10.0, 12.0, -5.0)
        assert placer.last_was_fallback is False

    def test_second_label_at_same_anchor_moves_far_right(self, placer):
        anchor = (0.0, 0.0, 0.0)
        first = placer.place(anchor, [])
        # above, upper_right, upper_left and further_above all sit within 30 of `first`.
        second = placer.place(anchor, [first])
        assert second == (35.0, 5.0, 0.0)
        assert placer.last_was_fallback is False

    def test_fallback_when_every_candidate_collides(self, placer):
        anchor = (100.0, 50.0, -20.0)
        taken = placer.candidates(anchor)
        chosen = placer.place(anchor, taken)

        assert placer.last_was_fallback is True
        assert chosen[1] == pytest.approx(anchor[1] + 20.0)
        assert abs(chosen[0] - anchor[0]) <= 25.0
        assert abs(chosen[2] - anchor[2]) <= 25.0

    def test_fallback_is_reproducible_with_seed(self):
        anchor = (0.0, 0.0, 0.0)
        a = LabelPlacer(seed=3)
        b = LabelPlacer(seed=3)
        taken = a.candidates(anchor)
        assert a.place(anchor, taken) == b.place(anchor, taken)

    def test_candidates_follow_priority_order(self, placer):
        anchor = (1.0, 2.0, 3.0)
        expected = [(1.0 + dx, 2.0 + dy, 3.0 + dz) for _name, (dx, dy, dz) in CANDIDATE_OFFSETS]
        assert_allclose(placer.candidates(anchor), expected)

    def test_invalid_configuration(self):
        with pytest.raises(ValueError):
            LabelPlacer(min_distance=0.0)
        with pytest.raises(ValueError):
            LabelPlacer(jitter=-1.0)


class TestPlaceAll:

    def test_separated_anchors_all_go_above(self, placer):
        anchors = [(100.0 * k, 0.0, 0.0) for k in range(5)]
        placements = placer.place_all(anchors)
        for anchor, placement in zip(anchors, placements):
            assert placement.chosen == (anchor[0], 12.0, anchor[2])
            assert placement.fallback is False

    def test_non_fallback_labels_keep_min_distance(self, placer):
        # Dense cluster forces both alternates and fallbacks.
        anchors = [(15.0 * i, 0.0, 15.0 * j) for i in range(5) for j in range(5)]
        placements = placer.place_all(anchors)

        assert len(placements) == len(anchors)
        for k, placement in enumerate(placements):
            if placement.fallback:
                continue
            for earlier in placements[:k]:
                assert v3_dist(placement.chosen, earlier.chosen) >= placer.min_distance

    def test_dense_cluster_uses_fallback(self, placer):
        anchors = [(0.0, 0.0, 0.0)] * 12
        placements = placer.place_all(anchors)
        assert any(p.fallback for p in placements)
        assert not placements[0].fallback


class TestTruncateLabel:

    def test_short_names_unchanged(self):
        assert truncate_label("Luna 2") == "Luna 2"
        assert truncate_label("x" * MAX_LABEL_CHARS) == "x" * MAX_LABEL_CHARS

    def test_long_names_truncated(self):
        label = truncate_label("Chandrayaan-3 Pragyan")
        assert label == "Chandrayaan-3 …"
        assert len(label) == MAX_LABEL_CHARS - 1
