"""Tests for the ring-chord partitioner and polygonization backends."""

import sys
from pathlib import Path

import pytest
from shapely.geometry import LineString, MultiLineString, MultiPolygon, Polygon

from conftest import square
from shoreline.analysis import (
    ExternalPolygonizer,
    RingChordPartitioner,
    ShapelyPolygonizer,
    build_polygonizer,
)
from shoreline.config import PolygonizerConfig
from shoreline.errors import PartitionFailed
from shoreline.geometry import merge_lines

HELPER = Path(__file__).parent / "helpers" / "polygonize_wkt.py"


@pytest.fixture
def partitioner():
    return RingChordPartitioner(ShapelyPolygonizer())


def test_classify_rings_and_chords(partitioner):
    network = MultiLineString([square(0, 0, 1, 1), [(2, 2), (3, 3)]])
    rings, chords = partitioner.classify(network)
    assert len(rings) == 1
    assert len(chords) == 1


def test_single_ring_is_one_face_without_holes(partitioner):
    result = partitioner.partition(MultiLineString([square(0, 0, 10, 10)]))
    assert isinstance(result, MultiPolygon)
    assert len(result.geoms) == 1
    face = result.geoms[0]
    assert len(face.interiors) == 0
    assert face.area == pytest.approx(100.0)


def test_inner_ring_becomes_hole(partitioner):
    network = MultiLineString([square(0, 0, 10, 10), square(3, 3, 8, 7)])
    result = partitioner.partition(network)
    assert len(result.geoms) == 1
    face = result.geoms[0]
    assert len(face.interiors) == 1
    assert face.area == pytest.approx(80.0)


def test_nested_rings_only_outermost_is_hole(partitioner):
    network = MultiLineString([square(0, 0, 10, 10), square(2, 2, 8, 8), square(4, 4, 6, 6)])
    face = partitioner.partition(network).geoms[0]
    assert len(face.interiors) == 1
    assert face.area == pytest.approx(64.0)


def test_chord_splits_envelope(partitioner):
    network = MultiLineString([[(0, 0), (10, 10)]])
    result = partitioner.partition(network)
    assert len(result.geoms) == 2
    assert sorted(round(p.area, 6) for p in result.geoms) == [50.0, 50.0]


def test_island_lands_in_the_face_that_contains_it(partitioner):
    # A vertical chord splits the envelope; the island sits in the right half
    network = MultiLineString([
        [(0, 0), (0, 10)],
        [(5, 0), (5, 10)],
        [(10, 0), (10, 10)],
        square(6, 2, 8, 4),
    ])
    result = partitioner.partition(network)
    assert len(result.geoms) == 2
    areas = sorted(round(p.area, 6) for p in result.geoms)
    assert areas == [46.0, 50.0]
    holes = [len(p.interiors) for p in result.geoms]
    assert sorted(holes) == [0, 1]


def test_ring_touching_face_boundary_is_not_a_hole(partitioner):
    network = MultiLineString([[(0, 0), (10, 0)], [(0, 10), (10, 10)], square(0, 2, 3, 5)])
    face = partitioner.partition(network).geoms[0]
    assert len(face.interiors) == 0


def test_partition_is_idempotent(partitioner):
    network = MultiLineString([
        [(0, 0), (10, 10)],
        square(1, 5, 3, 7),
        square(6, 1, 9, 3),
    ])
    first = partitioner.partition(network)

    boundary = merge_lines([
        LineString(ring.coords)
        for polygon in first.geoms
        for ring in [polygon.exterior, *polygon.interiors]
    ])
    second = partitioner.partition(boundary)

    assert len(second.geoms) == len(first.geoms)
    assert second.area == pytest.approx(first.area)


def test_empty_network_has_no_faces(partitioner):
    assert partitioner.partition(MultiLineString()).is_empty


def test_degenerate_envelope_fails(partitioner):
    with pytest.raises(PartitionFailed):
        partitioner.partition(MultiLineString([[(0, 0), (0, 10)]]))


def test_degenerate_ring_fails(partitioner):
    network = MultiLineString([[(0, 0), (10, 10)], [(2, 2), (3, 3), (2, 2)]])
    with pytest.raises(PartitionFailed):
        partitioner.partition(network)


# ============================================
# polygonization backends
# ============================================

def test_build_polygonizer():
    assert isinstance(build_polygonizer(None), ShapelyPolygonizer)
    assert isinstance(build_polygonizer(PolygonizerConfig()), ShapelyPolygonizer)
    external = build_polygonizer(PolygonizerConfig(command=["polygonize"], timeout_s=5))
    assert isinstance(external, ExternalPolygonizer)
    assert external.timeout_s == 5


def test_external_polygonizer_matches_in_process():
    network = MultiLineString([[(0, 0), (10, 10)], square(6, 1, 9, 3)])
    external = RingChordPartitioner(ExternalPolygonizer([sys.executable, str(HELPER)], timeout_s=60))
    internal = RingChordPartitioner(ShapelyPolygonizer())

    expected = internal.partition(network)
    result = external.partition(network)
    assert len(result.geoms) == len(expected.geoms)
    assert result.area == pytest.approx(expected.area)


def test_external_polygonizer_failure():
    polygonizer = ExternalPolygonizer([sys.executable, "-c", "import sys; sys.exit(3)"])
    with pytest.raises(PartitionFailed, match="status 3"):
        polygonizer.polygonize(MultiLineString([square(0, 0, 1, 1)]))


def test_external_polygonizer_missing_executable(tmp_path):
    polygonizer = ExternalPolygonizer([str(tmp_path / "no-such-polygonizer")])
    with pytest.raises(PartitionFailed):
        polygonizer.polygonize(MultiLineString([square(0, 0, 1, 1)]))


def test_external_polygonizer_rejects_non_polygon_output():
    polygonizer = ExternalPolygonizer([sys.executable, "-c", "print('LINESTRING (0 0, 1 1)')"])
    with pytest.raises(PartitionFailed):
        polygonizer.polygonize(MultiLineString([square(0, 0, 1, 1)]))


def test_external_polygonizer_rejects_garbage_output():
    polygonizer = ExternalPolygonizer([sys.executable, "-c", "print('not wkt')"])
    with pytest.raises(PartitionFailed):
        polygonizer.polygonize(MultiLineString([square(0, 0, 1, 1)]))


def test_external_polygonizer_single_polygon_output():
    polygonizer = ExternalPolygonizer([sys.executable, "-c", "print('POLYGON ((0 0, 1 0, 1 1, 0 0))')"])
    faces = polygonizer.polygonize(MultiLineString([square(0, 0, 1, 1)]))
    assert len(faces) == 1
    assert isinstance(faces[0], Polygon)
