"""
Mission trajectory synthesis and cursor animation.

Every point of every descent-bearing path must stay at least `clearance`
above the displaced terrain; steady orbits must close on themselves.
"""

import math

import pytest
from numpy.testing import assert_allclose

from moon_explorer.catalog import ARTIFACTS, Artifact, find_artifact
from moon_explorer.constants import EARTH_POSITION, MOON_RADIUS
from moon_explorer.elevation import surface_radius
from moon_explorer.geomath import great_circle_distance_deg, project, unproject, v3_len, v3_lerp, wrap_longitude
from moon_explorer.trajectory import (
    DEFAULT_TRAJECTORY_COLOR,
    MissionProfile,
    TrajectorySession,
    TrajectorySynthesizer,
    advance,
    classify_profile,
    clearance_report,
    trajectory_color,
)


@pytest.fixture
def synthesizer():
    return TrajectorySynthesizer()


# =============================================================================
# Test: classification and colours
# =============================================================================

class TestClassification:

    @pytest.mark.parametrize(
        "status, mission_type, expected",
        [
            ("Orbiting", "Orbiter", MissionProfile.STEADY_ORBIT),
            ("Crashed", "Orbiter", MissionProfile.ORBITER_DESCENT),
            ("Landed", "Lander", MissionProfile.DIRECT_ARC),
            ("Landed", "Lander/Rover", MissionProfile.DIRECT_ARC),
            ("Impactor", "Impactor", MissionProfile.DIRECT_ARC),
            ("crashed", "orbiter", MissionProfile.ORBITER_DESCENT),
        ],
    )
    def test_classify_profile(self, status, mission_type, expected):
        assert classify_profile(status, mission_type) is expected

    def test_colors(self):
        assert trajectory_color("Landed") == 0x66FF66
        assert trajectory_color("Crashed") == 0xFFEE55
        assert trajectory_color("Impactor") == 0xFF3366
        assert trajectory_color("Orbiting") == 0x00FFFF
        assert trajectory_color("Returned") == DEFAULT_TRAJECTORY_COLOR


# =============================================================================
# Test: path shapes
# =============================================================================

class TestSteadyOrbit:

    def test_orbit_closes(self, synthesizer, catalog_field):
        trajectory = synthesizer.build(find_artifact("LRO"), catalog_field)
        assert trajectory.profile is MissionProfile.STEADY_ORBIT
        assert len(trajectory.points) == synthesizer.orbit_segments + 1
        assert_allclose(trajectory.points[0], trajectory.points[-1], atol=1e-9)

    def test_orbit_stays_well_above_surface(self, synthesizer):
        trajectory = synthesizer.build(find_artifact("LRO"))
        assert min(v3_len(p) for p in trajectory.points) > MOON_RADIUS + 40.0

    def test_polar_mission_orbit(self, synthesizer):
        polar = Artifact(
            name="Polar", lat=90.0, lon=0.0, operator="-", year=2020, type="Orbiter", status="Orbiting",
        )
        trajectory = synthesizer.build(polar)
        assert_allclose(trajectory.points[0], trajectory.points[-1], atol=1e-9)


class TestOrbiterDescent:

    def test_structure(self, synthesizer):
        smart = find_artifact("SMART-1")
        trajectory = synthesizer.build(smart)
        points = trajectory.points

        assert trajectory.profile is MissionProfile.ORBITER_DESCENT
        assert len(points) == sum(synthesizer.profile_segments(trajectory.profile))
        assert points[0] == EARTH_POSITION
        assert_allclose(points[-1], synthesizer.landing_point(smart.lat, smart.lon, None), atol=1e-6)

    def test_parking_orbit_leg(self, synthesizer):
        smart = find_artifact("SMART-1")
        points = synthesizer.build(smart).points
        approach = synthesizer.approach_segments
        sweep_end = approach + synthesizer.sweep_segments

        insertion = unproject(points[approach])
        assert insertion.lat == pytest.approx(0.0, abs=1e-9)
        assert insertion.lon == pytest.approx(wrap_longitude(smart.lon + 180.0), abs=1e-9)

        top = unproject(points[sweep_end])
        assert top.lat == pytest.approx(smart.lat, abs=1e-9)
        assert top.lon == pytest.approx(wrap_longitude(smart.lon - 90.0), abs=1e-9)

        for k in range(approach, sweep_end + 1):
            assert v3_len(points[k]) == pytest.approx(synthesizer.orbit_radius)
        # Shorter way round: small steps only.
        for k in range(approach, sweep_end):
            step = great_circle_distance_deg(unproject(points[k]), unproject(points[k + 1]))
            assert step < 2.0

    def test_descent_bulges_outward(self, synthesizer):
        smart = find_artifact("SMART-1")
        points = synthesizer.build(smart).points
        sweep_end = synthesizer.approach_segments + synthesizer.sweep_segments
        top = points[sweep_end]
        landing = points[-1]

        middle = points[sweep_end + synthesizer.descent_segments // 2]
        assert v3_len(middle) > v3_len(v3_lerp(top, landing, 0.5))


class TestDirectArc:

    def test_structure(self, synthesizer, catalog_field):
        eagle = find_artifact("Apollo 11 Eagle")
        trajectory = synthesizer.build(eagle, catalog_field)
        assert trajectory.profile is MissionProfile.DIRECT_ARC
        assert trajectory.color == 0x66FF66
        assert len(trajectory.points) == synthesizer.arc_segments + 1
        assert trajectory.points[0] == EARTH_POSITION
        assert_allclose(
            trajectory.points[-1],
            synthesizer.landing_point(eagle.lat, eagle.lon, catalog_field),
            atol=1e-6,
        )

    def test_landing_sits_clearance_above_terrain(self, synthesizer, catalog_field):
        eagle = find_artifact("Apollo 11 Eagle")
        landing = synthesizer.landing_point(eagle.lat, eagle.lon, catalog_field)
        expected = surface_radius(catalog_field, eagle.lat, eagle.lon) + synthesizer.clearance
        assert v3_len(landing) == pytest.approx(expected)

    def test_flat_terrain_landing(self, synthesizer):
        landing = synthesizer.landing_point(10.0, 20.0, None)
        assert_allclose(landing, project(10.0, 20.0, MOON_RADIUS + synthesizer.clearance))


# =============================================================================
# Test: clearance over the whole catalog
# =============================================================================

@pytest.mark.parametrize("use_field", [True, False])
def test_descent_paths_clear_terrain(synthesizer, catalog_field, use_field):
    field = catalog_field if use_field else None
    for artifact in ARTIFACTS:
        trajectory = synthesizer.build(artifact, field)
        if trajectory.profile is MissionProfile.STEADY_ORBIT:
            continue
        for p in trajectory.points:
            geo = unproject(p)
            required = surface_radius(field, geo.lat, geo.lon) + synthesizer.clearance
            assert v3_len(p) >= required - 1e-6, artifact.name


def test_clearance_report(synthesizer, catalog_field):
    trajectory = synthesizer.build(find_artifact("Chang'e 4"), catalog_field)
    report = clearance_report(trajectory.points, catalog_field, synthesizer.clearance)
    assert report.min_margin >= -1e-6
    assert 0 <= report.index < len(trajectory.points)
    assert report.point == trajectory.points[report.index]


def test_clearance_report_empty_path():
    report = clearance_report([], None)
    assert report.index == -1
    assert report.point is None
    assert math.isinf(report.min_margin)


def test_build_returns_fresh_points(synthesizer):
    eagle = find_artifact("Apollo 11 Eagle")
    a = synthesizer.build(eagle)
    b = synthesizer.build(eagle)
    assert a.points == b.points
    assert a.points is not b.points


@pytest.mark.parametrize(
    "kwargs",
    [
        {"clearance": -1.0},
        {"orbit_altitude": 2.0, "clearance": 3.0},
        {"orbit_segments": 0},
        {"arc_segments": 0},
        {"earth_position": (100.0, 0.0, 0.0)},
    ],
)
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        TrajectorySynthesizer(**kwargs)


def test_wrap_to_pi():
    assert TrajectorySynthesizer._wrap_to_pi(math.pi) == pytest.approx(math.pi)
    assert TrajectorySynthesizer._wrap_to_pi(-math.pi) == pytest.approx(math.pi)
    assert TrajectorySynthesizer._wrap_to_pi(3 * math.pi / 2) == pytest.approx(-math.pi / 2)


# =============================================================================
# Test: animation session
# =============================================================================

class TestAdvance:

    @pytest.fixture
    def session(self):
        points = [(0.0, 0.0, 0.0), (10.0, 0.0, 0.0), (10.0, 10.0, 0.0)]
        return TrajectorySession(points=points, color=0xFFFFFF, speed=1.0 / 1000.0)

    def test_interpolates_within_segment(self, session):
        cursor = advance(session, 250.0)
        assert session.progress == pytest.approx(0.25)
        assert_allclose(cursor.position, (5.0, 0.0, 0.0), atol=1e-9)
        assert_allclose(cursor.tangent, (1.0, 0.0, 0.0))

        cursor = advance(session, 500.0)
        assert session.progress == pytest.approx(0.75)
        assert_allclose(cursor.position, (10.0, 5.0, 0.0), atol=1e-9)
        assert_allclose(cursor.tangent, (0.0, 1.0, 0.0))

    def test_end_of_path(self, session):
        cursor = advance(session, 1000.0)
        assert_allclose(cursor.position, (10.0, 10.0, 0.0), atol=1e-9)

    def test_wraps_past_end(self, session):
        advance(session, 900.0)
        cursor = advance(session, 200.0)
        assert session.progress == 0.0
        assert_allclose(cursor.position, (0.0, 0.0, 0.0))

    def test_negative_dt_does_not_rewind(self, session):
        advance(session, 300.0)
        advance(session, -100.0)
        assert session.progress == pytest.approx(0.3)

    def test_cleared_session_is_inert(self, session):
        advance(session, 300.0)
        session.clear()
        assert not session.active
        assert session.progress == 0.0
        assert advance(session, 100.0) is None
        assert session.progress == 0.0

    def test_single_point(self):
        session = TrajectorySession(points=[(1.0, 2.0, 3.0)])
        cursor = advance(session, 10.0)
        assert cursor.position == (1.0, 2.0, 3.0)
        assert cursor.tangent == (0.0, 0.0, 1.0)


def test_new_session_replaces_previous(synthesizer):
    first = synthesizer.start_session(find_artifact("Apollo 11 Eagle"))
    advance(first, 2000.0)
    second = synthesizer.start_session(find_artifact("LRO"))

    assert second.progress == 0.0
    assert second.active
    assert second.points == synthesizer.build(find_artifact("LRO")).points
    assert second.color == 0x00FFFF
    assert second.speed == synthesizer.session_speed
