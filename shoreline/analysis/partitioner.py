"""
Ring-chord partitioning

Splits a line network into land/water faces with their holes assigned
"""

from typing import List, Tuple

import shapely
from loguru import logger
from shapely.errors import ShapelyError
from shapely.geometry import LineString, MultiLineString, MultiPolygon, Polygon

from ..config import get_config
from ..errors import GeometryOperationFailed, PartitionFailed
from ..geometry import as_multilinestring
from ..geometry.utils import ring_polygon
from .polygonizer import build_polygonizer


class RingChordPartitioner:
    """
    Convert a merged line network into faces

    Algorithm:
    1. Split the network into rings (closed lines) and chords (open lines)
    2. Seed the chords with the boundary of the network envelope, so there is
       always an enclosing face
    3. Polygonize the chords when there is more than the envelope; otherwise
       the envelope is the only face
    4. Every ring lying strictly inside a face becomes one of its holes.
       Rings nested inside another such ring sit in that hole, not the face.
    """

    def __init__(self, polygonizer=None):
        self.polygonizer = polygonizer or build_polygonizer(get_config().polygonizer)

    def classify(self, network: MultiLineString) -> Tuple[List[LineString], List[LineString]]:
        """Split the network lines into (rings, chords)"""
        rings = []
        chords = []
        for line in network.geoms:
            if line.is_closed:
                rings.append(line)
            else:
                chords.append(line)
        return rings, chords

    def partition(self, network: MultiLineString) -> MultiPolygon:
        """
        Partition the network into a MultiPolygon

        Raises:
            PartitionFailed: If any step of the partition fails
        """
        if network.is_empty:
            logger.debug("Empty line network - no faces")
            return MultiPolygon()

        try:
            envelope = network.envelope
        except ShapelyError as e:
            raise PartitionFailed(f"Envelope failed: {e}") from e
        if envelope.geom_type != "Polygon" or envelope.area <= 0:
            raise PartitionFailed(f"Degenerate network envelope ({envelope.geom_type})")

        rings, chords = self.classify(network)
        chords = [LineString(envelope.exterior.coords)] + chords
        logger.debug(f"Partitioning {len(rings)} rings and {len(chords)} chords")

        if len(chords) > 1:
            try:
                noded = as_multilinestring(shapely.union_all(chords))
            except ShapelyError as e:
                raise PartitionFailed(f"Noding chords failed: {e}") from e
            faces = self.polygonizer.polygonize(noded)
        else:
            faces = [envelope]

        if not faces:
            raise PartitionFailed("Polygonize produced no faces")

        try:
            ring_polygons = [ring_polygon(ring) for ring in rings]
            polygons = [self._assign_holes(face, ring_polygons) for face in faces]
            result = MultiPolygon(polygons)
        except (GeometryOperationFailed, ShapelyError, ValueError) as e:
            raise PartitionFailed(f"Ring/face association failed: {e}") from e

        logger.debug(f"Partitioned network into {len(polygons)} faces")
        return result

    def _assign_holes(self, face: Polygon, ring_polygons: List[Polygon]) -> Polygon:
        """Rebuild a face with the rings it strictly contains as holes"""
        contained = [ring for ring in ring_polygons if face.contains_properly(ring)]
        holes = [
            ring for ring in contained
            if not any(other is not ring and other.contains_properly(ring) for other in contained)
        ]

        interiors = [list(interior.coords) for interior in face.interiors]
        interiors.extend(list(ring.exterior.coords) for ring in holes)
        return Polygon(list(face.exterior.coords), interiors)
