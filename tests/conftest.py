import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

DATA_DIR = project_root / "tests" / "data"


def make_feature(geometry, feature_id=None, **properties):
    feature = {"type": "Feature", "geometry": geometry, "properties": properties}
    if feature_id is not None:
        feature["id"] = feature_id
    return feature


def make_collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


def square(x0, y0, x1, y1):
    """Closed ring coordinates for an axis-aligned rectangle"""
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]]


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def baseline_path():
    return DATA_DIR / "baseline.geojson"


@pytest.fixture
def detected_path():
    return DATA_DIR / "detected.geojson"
