"""
Geometry engine adapter

Thin layer between GeoJSON records and shapely geometries:
- geojson: document parsing and GeoJSON <-> shapely conversion
- utils: canonical line forms, closedness and vertex distances
"""

from .geojson import (
    parse_geojson,
    read_geojson_bytes,
    to_geometry_array,
    to_shapely,
    from_shapely,
)
from .utils import (
    as_multilinestring,
    is_closed,
    line_parts,
    line_string_from_geometry,
    merge_lines,
    vertex_distances,
)

__all__ = [
    "parse_geojson",
    "read_geojson_bytes",
    "to_geometry_array",
    "to_shapely",
    "from_shapely",
    "as_multilinestring",
    "is_closed",
    "line_parts",
    "line_string_from_geometry",
    "merge_lines",
    "vertex_distances",
]
