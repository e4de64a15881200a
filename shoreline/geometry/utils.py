"""
Geometry utility functions

Line-network helpers shared by the scene, partitioner and matcher
"""

from typing import Iterator, List

import numpy as np
import shapely
from shapely.errors import ShapelyError
from shapely.geometry import LineString, MultiLineString, Polygon
from shapely.geometry.base import BaseGeometry

from ..errors import GeometryOperationFailed


def leaf_geometries(geometry: BaseGeometry) -> Iterator[BaseGeometry]:
    """Yield the single-part geometries of any (possibly nested) collection"""
    if geometry is None or geometry.is_empty:
        return
    if hasattr(geometry, "geoms"):
        for part in geometry.geoms:
            yield from leaf_geometries(part)
    else:
        yield geometry


def line_parts(geometry: BaseGeometry, include_polygons: bool = False) -> List[LineString]:
    """
    Collect the linear parts of a geometry as LineStrings

    Points are dropped. Polygons are dropped unless include_polygons is set,
    in which case their exterior ring is kept.
    """
    lines = []
    for leaf in leaf_geometries(geometry):
        if leaf.geom_type in ("LineString", "LinearRing"):
            lines.append(LineString(leaf.coords))
        elif include_polygons and leaf.geom_type == "Polygon":
            lines.append(LineString(leaf.exterior.coords))
    return lines


def as_multilinestring(geometry: BaseGeometry) -> MultiLineString:
    """Normalize the linear result of an overlay to a MultiLineString"""
    lines = line_parts(geometry)
    if not lines:
        return MultiLineString()
    return MultiLineString(lines)


def merge_lines(lines: List[LineString]) -> MultiLineString:
    """Union the lines together, then join them where their endpoints match"""
    if not lines:
        return MultiLineString()
    try:
        noded = shapely.union_all(lines)
        merged = shapely.line_merge(as_multilinestring(noded))
    except ShapelyError as e:
        raise GeometryOperationFailed(f"Line merge failed: {e}") from e
    return as_multilinestring(merged)


def line_string_from_geometry(geometry: BaseGeometry) -> BaseGeometry:
    """
    Reduce a geometry to its canonical line form

    Lines stay as they are, polygons become their exterior ring, points carry
    no linework. Several lines are merged where their endpoints coincide.
    Returns a LineString, a MultiLineString or an empty MultiLineString.
    """
    lines = line_parts(geometry, include_polygons=True)
    if not lines:
        return MultiLineString()
    if len(lines) == 1:
        return lines[0]
    try:
        merged = shapely.line_merge(MultiLineString(lines))
    except ShapelyError as e:
        raise GeometryOperationFailed(f"Line merge failed: {e}") from e
    parts = line_parts(merged)
    if len(parts) == 1:
        return parts[0]
    return MultiLineString(parts)


def is_closed(geometry: BaseGeometry) -> bool:
    """A line is closed when it ends where it starts; a multi-line when every part is"""
    if geometry is None or geometry.is_empty:
        return False
    if geometry.geom_type in ("LineString", "LinearRing"):
        return bool(geometry.is_closed)
    if geometry.geom_type == "MultiLineString":
        return all(part.is_closed for part in geometry.geoms)
    return False


def ring_polygon(ring: LineString) -> Polygon:
    """Polygon enclosed by a closed line"""
    try:
        return Polygon(ring.coords)
    except (ShapelyError, ValueError) as e:
        raise GeometryOperationFailed(f"Degenerate ring: {e}") from e


def vertex_distances(source: BaseGeometry, target: BaseGeometry) -> np.ndarray:
    """Distance from every vertex of source to the target geometry"""
    try:
        coords = shapely.get_coordinates(source)
        if len(coords) == 0:
            return np.empty(0)
        return shapely.distance(shapely.points(coords), target)
    except ShapelyError as e:
        raise GeometryOperationFailed(f"Distance calculation failed: {e}") from e
