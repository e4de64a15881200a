"""
GeoJSON adapter

Converts between GeoJSON mappings and shapely geometries:
- parse_geojson / read_geojson_bytes: document loading
- to_geometry_array: plucks the geometries out of any GeoJSON object
- to_shapely / from_shapely: geometry conversion
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from shapely.errors import ShapelyError
from shapely.geometry import GeometryCollection, LineString, mapping, shape
from shapely.geometry.base import BaseGeometry

from ..errors import GeometryOperationFailed, InputError, TypeMismatch

GEOMETRY_TYPES = {
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "GeometryCollection",
}

GEOJSON_TYPES = GEOMETRY_TYPES | {"Feature", "FeatureCollection"}


def read_geojson_bytes(path: Union[str, Path]) -> bytes:
    """Read a GeoJSON file from disk"""
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise InputError(f"Cannot read {path}: {e}") from e


def parse_geojson(data: Union[bytes, str]) -> Dict[str, Any]:
    """
    Parse a GeoJSON document

    Raises:
        InputError: If the document is not JSON or not a GeoJSON object
    """
    try:
        obj = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InputError(f"Invalid JSON: {e}") from e

    if not isinstance(obj, dict) or obj.get("type") not in GEOJSON_TYPES:
        kind = obj.get("type") if isinstance(obj, dict) else type(obj).__name__
        raise InputError(f"Not a GeoJSON object (type: {kind})")
    return obj


def to_geometry_array(obj: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Pluck the geometries out of a GeoJSON object

    FeatureCollections yield the geometry of each feature, a Feature yields
    its geometry and a bare geometry yields itself. Null geometries are skipped.
    """
    if obj is None:
        return []

    kind = obj.get("type")
    if kind == "FeatureCollection":
        geometries = []
        for feature in obj.get("features") or []:
            geometries.extend(to_geometry_array(feature))
        return geometries
    if kind == "Feature":
        geometry = obj.get("geometry")
        return [geometry] if geometry else []
    if kind in GEOMETRY_TYPES:
        return [obj]
    raise TypeMismatch(f"Unexpected GeoJSON type: {kind}")


def to_shapely(obj: Dict[str, Any]) -> BaseGeometry:
    """
    Convert a GeoJSON geometry (or Feature) to a shapely geometry

    Raises:
        TypeMismatch: For unsupported geometry types
        GeometryOperationFailed: For malformed coordinates
    """
    if obj is None:
        return GeometryCollection()

    kind = obj.get("type")
    if kind == "Feature":
        return to_shapely(obj.get("geometry"))
    if kind not in GEOMETRY_TYPES:
        raise TypeMismatch(f"Unsupported geometry type: {kind}")

    try:
        return shape(obj)
    except (ShapelyError, ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
        raise GeometryOperationFailed(f"Invalid {kind} geometry: {e}") from e


def from_shapely(geometry: BaseGeometry) -> Dict[str, Any]:
    """Convert a shapely geometry to a GeoJSON geometry mapping"""
    kind = geometry.geom_type
    if kind == "LinearRing":
        geometry = LineString(geometry.coords)
    elif kind not in GEOMETRY_TYPES:
        raise TypeMismatch(f"Unsupported geometry type: {kind}")

    try:
        return _listify(mapping(geometry))
    except (ShapelyError, ValueError) as e:
        raise GeometryOperationFailed(f"Cannot serialize {kind}: {e}") from e


def _listify(value: Any) -> Any:
    """Turn the tuples produced by shapely's mapping() into JSON-style lists"""
    if isinstance(value, dict):
        return {k: _listify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_listify(v) for v in value]
    return value
