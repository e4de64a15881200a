"""
Polarity analysis - decides which faces are land and which are water

Faces are linked into a forest by adjacency, rooted at the first face. The
parity of a face's depth in that forest gives its polarity.
"""

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger
from shapely.errors import ShapelyError
from shapely.geometry import MultiPolygon, Polygon

from ..errors import GeometryOperationFailed, InvariantViolation
from ..models import AreaReport


@dataclass
class Face:
    """One face of a partitioned network, stored in an index-addressed arena"""
    index: int
    total_area: float  # With holes removed
    boundary_area: float  # Outer ring alone
    is_terminal: bool = False
    parent: Optional[int] = None

    @property
    def hole_area(self) -> float:
        return self.boundary_area - self.total_area


class PolarityGrapher:
    """
    Assign a land/water sign to every face and total up the areas

    Even-depth faces count their area as positive and their holes as
    negative; odd-depth faces the other way round.
    """

    def build_faces(self, polygons: MultiPolygon) -> List[Face]:
        """Measure every face and link the adjacency forest"""
        parts = list(polygons.geoms)
        faces = []
        for inx, polygon in enumerate(parts):
            try:
                total_area = polygon.area
                boundary_area = Polygon(polygon.exterior.coords).area
            except (ShapelyError, ValueError) as e:
                raise GeometryOperationFailed(f"Area of face {inx} failed: {e}") from e
            faces.append(Face(
                index=inx,
                total_area=total_area,
                boundary_area=boundary_area,
                is_terminal=(inx == 0)
            ))

        self._link(faces, parts)
        return faces

    def _link(self, faces: List[Face], parts: List[Polygon]) -> None:
        """
        Link each unlinked face to the first face it is found touching

        The terminal face is never linked, so it stays the root.
        """
        for inx, polygon in enumerate(parts):
            for jnx in range(1, len(parts)):
                if jnx == inx or faces[jnx].parent is not None:
                    continue
                try:
                    touches = parts[jnx].touches(polygon)
                except ShapelyError as e:
                    raise GeometryOperationFailed(f"Touch test {jnx}/{inx} failed: {e}") from e
                if touches:
                    faces[jnx].parent = inx

    @staticmethod
    def depth(faces: List[Face], index: int) -> int:
        """
        Count the steps from a face to the terminal face

        Raises:
            InvariantViolation: If the walk leaves the forest or loops
        """
        steps = 0
        current = index
        visited = {current}
        while not faces[current].is_terminal:
            parent = faces[current].parent
            if parent is None:
                raise InvariantViolation(
                    f"Face {current} is not connected to the terminal face "
                    f"(disconnected face forest)"
                )
            if parent in visited:
                raise InvariantViolation(f"Face {index} is part of a parent-link cycle")
            visited.add(parent)
            current = parent
            steps += 1
        return steps

    def review(self, polygons: MultiPolygon) -> AreaReport:
        """Total the positive and negative areas of a partitioned network"""
        if polygons.is_empty:
            return AreaReport.from_areas(0.0, 0.0)

        faces = self.build_faces(polygons)
        positive_area = 0.0
        negative_area = 0.0
        for face in faces:
            if self.depth(faces, face.index) % 2 == 0:
                positive_area += face.total_area
                negative_area += face.hole_area
            else:
                negative_area += face.total_area
                positive_area += face.hole_area

        report = AreaReport.from_areas(positive_area, negative_area, face_count=len(faces))
        logger.debug(f"Polarity over {len(faces)} faces: {report.summary()}")
        return report
