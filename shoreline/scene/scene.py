"""
Shoreline scene

Wraps one linework dataset and its canonical line network
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger
from shapely.errors import ShapelyError
from shapely.geometry import LineString, MultiLineString
from shapely.geometry.base import BaseGeometry

from ..errors import GeometryOperationFailed, TypeMismatch
from ..geometry import (
    line_parts,
    merge_lines,
    parse_geojson,
    read_geojson_bytes,
    to_geometry_array,
    to_shapely,
)


class Scene:
    """
    A shoreline scene, consisting of linework for shoreline features

    The line network is built on first use and cached for the lifetime of
    the scene; clip() replaces it.

    Usage:
        scene = Scene.from_file("baseline.geojson", name="baseline")
        network = scene.network()
    """

    def __init__(self, geojson: Optional[Dict[str, Any]], name: str = "scene"):
        self.geojson = geojson
        self.name = name
        self._network: Optional[MultiLineString] = None
        self._clip_region: Optional[BaseGeometry] = None

    @classmethod
    def from_bytes(cls, data: Union[bytes, str], name: str = "scene") -> "Scene":
        return cls(parse_geojson(data), name=name)

    @classmethod
    def from_file(cls, path: Union[str, Path], name: Optional[str] = None) -> "Scene":
        return cls.from_bytes(read_geojson_bytes(path), name=name or Path(path).stem)

    def network(self) -> MultiLineString:
        """
        Canonical line network of the scene

        Every geometry of the input is unioned into one MultiLineString
        (polygons contribute their outer ring only), then lines whose
        endpoints coincide are joined.
        """
        if self._network is not None:
            return self._network

        lines: List[LineString] = []
        skipped = 0
        for gj_geometry in to_geometry_array(self.geojson):
            geometry = to_shapely(gj_geometry)
            parts = line_parts(geometry, include_polygons=True)
            if not parts and not geometry.is_empty:
                skipped += 1
            lines.extend(parts)

        if skipped:
            logger.debug(f"{self.name}: skipped {skipped} geometries without linework")

        self._network = merge_lines(lines)
        logger.debug(f"{self.name}: {len(lines)} input lines merged into {len(self._network.geoms)}")
        return self._network

    def geometries(self) -> List[LineString]:
        """The individual lines of the network, in network order"""
        return list(self.network().geoms)

    def features(self) -> List[Dict[str, Any]]:
        """Return the GeoJSON features"""
        if not isinstance(self.geojson, dict) or self.geojson.get("type") != "FeatureCollection":
            kind = self.geojson.get("type") if isinstance(self.geojson, dict) else None
            raise TypeMismatch(f"GeoJSON input must be a FeatureCollection (got {kind})")
        return list(self.geojson.get("features") or [])

    def scored_features(self) -> List[Dict[str, Any]]:
        """
        Features that take part in the qualitative review

        After clip(), features lying wholly outside the clip region are left
        out. An unclipped scene, or one clipped to an empty region, scores
        every feature.
        """
        features = self.features()
        region = self._clip_region
        if region is None or region.is_empty:
            return features

        scored = []
        for feature in features:
            geometry = to_shapely(feature)
            try:
                outside = not geometry.is_empty and geometry.disjoint(region)
            except ShapelyError as e:
                raise GeometryOperationFailed(f"{self.name}: region test failed: {e}") from e
            if not outside:
                scored.append(feature)

        if len(scored) < len(features):
            logger.debug(f"{self.name}: {len(features) - len(scored)} features outside the clip region")
        return scored

    def envelope(self) -> BaseGeometry:
        """Bounding rectangle of the line network"""
        try:
            return self.network().envelope
        except ShapelyError as e:
            raise GeometryOperationFailed(f"{self.name}: envelope failed: {e}") from e

    def clip(self, other: "Scene") -> None:
        """Restrict this scene's network to the envelope of another scene"""
        envelope = other.envelope()
        network = self.network()
        try:
            clipped = envelope.intersection(network)
        except ShapelyError as e:
            raise GeometryOperationFailed(f"{self.name}: clip failed: {e}") from e
        self._clip_region = envelope
        # Overlay splits lines at every node; join them back up
        self._network = merge_lines(line_parts(clipped))
        logger.debug(
            f"{self.name}: clipped to {other.name} envelope "
            f"({len(network.geoms)} -> {len(self._network.geoms)} lines)"
        )

    def __repr__(self) -> str:
        return f"Scene(name={self.name!r})"
