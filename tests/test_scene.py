"""Renderer-facing scene data: markers, resource rings, terrain mesh, filters."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from moon_explorer.catalog import ARTIFACTS, RESOURCES, find_artifact
from moon_explorer.colorizer import hex_to_rgb
from moon_explorer.constants import MOON_RADIUS, TERRAIN_EXAGGERATION
from moon_explorer.geomath import project, v3_dist, v3_len
from moon_explorer.scene import (
    MARKER_HEIGHT,
    artifact_count_text,
    artifact_info,
    camera_focus_path,
    ease_out_quad,
    elevation_km,
    filter_artifacts,
    origin_group,
    place_artifacts,
    resource_ring,
    search_artifact,
    terrain_mesh,
)


# =============================================================================
# Test: artifact markers
# =============================================================================

class TestPlaceArtifacts:

    def test_marker_sits_above_flat_surface(self):
        markers = place_artifacts(ARTIFACTS, None)
        assert len(markers) == len(ARTIFACTS)
        for marker in markers:
            assert v3_len(marker.surface) == pytest.approx(MOON_RADIUS)
            assert v3_len(marker.position) == pytest.approx(MOON_RADIUS + MARKER_HEIGHT)

    def test_marker_follows_terrain(self, catalog_field):
        eagle = find_artifact("Apollo 11 Eagle")
        marker = place_artifacts([eagle], catalog_field)[0]
        expected = MOON_RADIUS + catalog_field.sample(eagle.lat, eagle.lon) * TERRAIN_EXAGGERATION
        assert v3_len(marker.surface) == pytest.approx(expected)

    def test_marker_colour_and_label(self):
        luna = find_artifact("Luna 2")
        marker = place_artifacts([luna], None)[0]
        assert marker.color == 0xFF3366
        assert marker.label == "Luna 2"
        assert marker.label_position == (marker.position[0], marker.position[1] + 12.0, marker.position[2])

    def test_labels_are_deterministic(self):
        a = place_artifacts(ARTIFACTS, None)
        b = place_artifacts(ARTIFACTS, None)
        assert [m.label_position for m in a] == [m.label_position for m in b]


# =============================================================================
# Test: resource rings
# =============================================================================

class TestResourceRing:

    def test_ring_is_closed(self):
        ring = resource_ring(RESOURCES[0], None)
        assert len(ring.points) == 33
        assert_allclose(ring.points[0], ring.points[-1], atol=1e-9)

    def test_ring_floats_above_flat_surface(self):
        ring = resource_ring(RESOURCES[0], None)
        for p in ring.points:
            assert v3_len(p) == pytest.approx(MOON_RADIUS + 2.0)

    def test_ring_style(self):
        resource = RESOURCES[0]
        ring = resource_ring(resource, None, segments=8)
        assert len(ring.points) == 9
        assert ring.opacity == pytest.approx(resource.concentration * 0.7)
        assert ring.color != 0xFFFFFF

    def test_too_few_segments(self):
        with pytest.raises(ValueError):
            resource_ring(RESOURCES[0], None, segments=2)


# =============================================================================
# Test: terrain mesh
# =============================================================================

class TestTerrainMesh:

    def test_flat_mesh(self):
        mesh = terrain_mesh(None, 8, 4)
        assert mesh.vertices.shape == (45, 3)
        assert mesh.colors.shape == (45, 3)
        assert_allclose(np.linalg.norm(mesh.vertices, axis=1), MOON_RADIUS)
        assert_allclose(mesh.colors, np.tile(hex_to_rgb(0x73787D), (45, 1)))

    def test_faces(self):
        mesh = terrain_mesh(None, 8, 4)
        # Pole rows contribute one triangle per quad, the rest two.
        assert mesh.faces.shape == (8 * (2 * 4 - 2), 3)
        assert mesh.faces.min() >= 0
        assert mesh.faces.max() < 45

    def test_displaced_mesh(self, catalog_field):
        mesh = terrain_mesh(catalog_field, 16, 8)
        radii = np.linalg.norm(mesh.vertices, axis=1)
        assert_allclose(radii, MOON_RADIUS + mesh.elevations * TERRAIN_EXAGGERATION)
        assert not np.allclose(mesh.elevations, mesh.elevations[0])

    def test_invalid_segments(self):
        with pytest.raises(ValueError):
            terrain_mesh(None, 2, 4)
        with pytest.raises(ValueError):
            terrain_mesh(None, 8, 1)


# =============================================================================
# Test: filtering and search
# =============================================================================

class TestFilters:

    def test_origin_groups(self):
        assert origin_group("Soviet Union") == "soviet"
        assert origin_group("Russia") == "soviet"
        assert origin_group("United States") == "us"
        assert origin_group("Europe") == "other"

    def test_filter_soviet_only(self):
        visible = filter_artifacts(ARTIFACTS, us=False, other=False)
        assert visible
        assert all(origin_group(a.operator) == "soviet" for a in visible)

    def test_filter_all_hidden(self):
        assert filter_artifacts(ARTIFACTS, soviet=False, us=False, other=False) == []

    def test_query_matches_name_and_year(self):
        by_name = filter_artifacts(ARTIFACTS, query="apollo")
        assert by_name
        assert all("apollo" in a.name.lower() for a in by_name)

        by_year = filter_artifacts(ARTIFACTS, query="1969")
        assert by_year
        assert all(a.year == 1969 for a in by_year)

    def test_count_text(self):
        assert artifact_count_text(3, 57) == "Showing 3 of 57 artifacts"

    def test_search(self):
        assert search_artifact("surveyor 3").name == "Surveyor 3"
        assert search_artifact("no such mission") is None


# =============================================================================
# Test: camera focus and tooltips
# =============================================================================

def test_ease_out_quad():
    assert ease_out_quad(0.0) == 0.0
    assert ease_out_quad(1.0) == 1.0
    assert ease_out_quad(0.5) == pytest.approx(0.75)


def test_camera_focus_path():
    start = (0.0, 0.0, 800.0)
    path = camera_focus_path(start, 10.0, 20.0, steps=30)
    end = project(10.0, 20.0, MOON_RADIUS + 300.0)

    assert len(path) == 31
    assert path[0] == start
    assert_allclose(path[-1], end)
    remaining = [v3_dist(p, end) for p in path]
    assert all(a >= b for a, b in zip(remaining, remaining[1:]))


def test_artifact_info(catalog_field):
    eagle = find_artifact("Apollo 11 Eagle")
    info = artifact_info(eagle, catalog_field)
    assert info["name"] == "Apollo 11 Eagle"
    assert info["year"] == 1969
    assert info["elevation_km"] == round(elevation_km(catalog_field, eagle.lat, eagle.lon), 1)


def test_elevation_km_without_field():
    assert elevation_km(None, 0.0, 0.0) == 0.0


def test_elevation_km_matches_field(catalog_field):
    assert elevation_km(catalog_field, -12.0, 140.0) == pytest.approx(catalog_field.sample_km(-12.0, 140.0))
