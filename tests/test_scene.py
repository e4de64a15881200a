"""Tests for Scene: line network construction, envelope and clipping."""

import json

import pytest

from conftest import make_collection, make_feature, square
from shoreline.errors import InputError, TypeMismatch
from shoreline.scene import Scene


def test_scene_from_file(baseline_path, detected_path):
    baseline = Scene.from_file(baseline_path)
    detected = Scene.from_file(detected_path)
    assert baseline.name == "baseline"
    assert len(baseline.features()) == 3
    # The two touching detected segments are joined into one line
    assert len(detected.geometries()) == 2


def test_scene_from_bytes_invalid():
    with pytest.raises(InputError):
        Scene.from_bytes(b"<kml/>")


def test_network_reduces_polygons_to_outer_ring():
    fc = make_collection(make_feature({
        "type": "Polygon",
        "coordinates": [square(0, 0, 10, 10), square(3, 3, 8, 7)]
    }))
    network = Scene(fc).network()
    assert len(network.geoms) == 1
    ring = network.geoms[0]
    assert ring.is_closed
    assert ring.length == pytest.approx(40.0)


def test_network_skips_points():
    fc = make_collection(
        make_feature({"type": "Point", "coordinates": [1, 1]}),
        make_feature({"type": "LineString", "coordinates": [[0, 0], [4, 0]]}),
    )
    network = Scene(fc).network()
    assert len(network.geoms) == 1


def test_network_merges_across_features():
    fc = make_collection(
        make_feature({"type": "LineString", "coordinates": [[0, 0], [4, 0]]}),
        make_feature({"type": "LineString", "coordinates": [[4, 0], [4, 4]]}),
    )
    network = Scene(fc).network()
    assert len(network.geoms) == 1
    assert network.geoms[0].length == pytest.approx(8.0)


def test_network_is_cached():
    scene = Scene(make_collection(make_feature({"type": "LineString", "coordinates": [[0, 0], [1, 1]]})))
    assert scene.network() is scene.network()


def test_empty_scene_has_empty_network():
    scene = Scene(make_collection())
    assert scene.network().is_empty
    assert scene.geometries() == []
    assert scene.features() == []


def test_features_requires_feature_collection():
    scene = Scene({"type": "LineString", "coordinates": [[0, 0], [1, 1]]})
    # The network still works on a bare geometry
    assert len(scene.geometries()) == 1
    with pytest.raises(TypeMismatch):
        scene.features()


def test_envelope():
    scene = Scene(make_collection(
        make_feature({"type": "LineString", "coordinates": [[0, 0], [4, 2]]}),
        make_feature({"type": "LineString", "coordinates": [[-1, 5], [2, 3]]}),
    ))
    assert scene.envelope().bounds == (-1.0, 0.0, 4.0, 5.0)


def test_clip_restricts_network_to_other_envelope():
    baseline = Scene(make_collection(
        make_feature({"type": "LineString", "coordinates": [[0, 0], [20, 0]]}),
        make_feature({"type": "LineString", "coordinates": [[50, 50], [60, 60]]}),
    ))
    detected = Scene(make_collection(
        make_feature({"type": "LineString", "coordinates": [[0, -1], [10, 1]]}),
    ))
    baseline.clip(detected)
    network = baseline.network()
    assert len(network.geoms) == 1
    assert network.length == pytest.approx(10.0)
    # Features are untouched by clipping; only the scored set shrinks
    assert len(baseline.features()) == 2
    assert baseline.scored_features() == baseline.features()[:1]


def test_scored_features_without_clip(baseline_path):
    baseline = Scene.from_file(baseline_path)
    assert baseline.scored_features() == baseline.features()


def test_scored_features_clipped_to_empty_region(baseline_path):
    baseline = Scene.from_file(baseline_path)
    baseline.clip(Scene(make_collection()))
    assert baseline.network().is_empty
    assert len(baseline.scored_features()) == 3


def test_scored_features_keep_null_geometry():
    baseline = Scene(make_collection(
        make_feature(None, feature_id="empty"),
        make_feature({"type": "LineString", "coordinates": [[50, 50], [60, 60]]}),
    ))
    detected = Scene(make_collection(
        make_feature({"type": "LineString", "coordinates": [[0, 0], [10, 10]]}),
    ))
    baseline.clip(detected)
    assert [f.get("id") for f in baseline.scored_features()] == ["empty"]


def test_clip_keeps_rings_inside_envelope(baseline_path, detected_path):
    baseline = Scene.from_file(baseline_path)
    detected = Scene.from_file(detected_path)
    baseline.clip(detected)
    lines = baseline.geometries()
    assert len(lines) == 2
    assert all(line.is_closed for line in lines)
    assert sorted(round(line.length, 6) for line in lines) == [18.0, 40.0]


def test_scene_roundtrip_through_json(tmp_path):
    path = tmp_path / "lines.geojson"
    path.write_text(json.dumps(make_collection(
        make_feature({"type": "MultiLineString", "coordinates": [square(0, 0, 1, 1), [[5, 5], [6, 6]]]})
    )))
    scene = Scene.from_file(path, name="lines")
    assert scene.name == "lines"
    assert sorted(line.is_closed for line in scene.geometries()) == [False, True]
