"""
Polygonization backends

Turn a noded set of lines into the faces they enclose:
- ShapelyPolygonizer: in-process shapely polygonize
- ExternalPolygonizer: hands WKT to a separately built executable
"""

import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from loguru import logger
from shapely import wkt
from shapely.errors import ShapelyError
from shapely.geometry import MultiLineString, Polygon
from shapely.ops import polygonize

from ..config import PolygonizerConfig
from ..errors import PartitionFailed


class ShapelyPolygonizer:
    """Polygonize with shapely in the current process"""

    def polygonize(self, lines: MultiLineString) -> List[Polygon]:
        try:
            return list(polygonize(list(lines.geoms)))
        except ShapelyError as e:
            raise PartitionFailed(f"Polygonize failed: {e}") from e


class ExternalPolygonizer:
    """
    Polygonize by shelling out to an external executable

    The lines are written as WKT to a temporary file whose path is appended to
    the command; the executable prints the resulting faces as WKT on stdout
    (a MultiPolygon or a GeometryCollection of polygons).
    """

    def __init__(
        self,
        command: List[str],
        timeout_s: float = 120.0,
        temp_prefix: str = "shoreline-polygonize-"
    ):
        self.command = list(command)
        self.timeout_s = timeout_s
        self.temp_prefix = temp_prefix

    def polygonize(self, lines: MultiLineString) -> List[Polygon]:
        # The temporary directory goes away on every exit path
        with tempfile.TemporaryDirectory(prefix=self.temp_prefix) as tmp_dir:
            input_path = Path(tmp_dir) / "lines.wkt"
            input_path.write_text(lines.wkt, encoding="utf-8")

            cmd = self.command + [str(input_path)]
            logger.debug(f"Running polygonizer: {' '.join(cmd)}")

            try:
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout_s
                )
            except subprocess.TimeoutExpired as e:
                raise PartitionFailed(f"Polygonizer timed out after {self.timeout_s}s") from e
            except OSError as e:
                raise PartitionFailed(f"Cannot run polygonizer {self.command[0]}: {e}") from e

        if result.returncode != 0:
            raise PartitionFailed(
                f"Polygonizer exited with status {result.returncode}: {result.stderr.strip()}"
            )

        return self._parse_output(result.stdout)

    def _parse_output(self, output: str) -> List[Polygon]:
        text = output.strip()
        if not text:
            raise PartitionFailed("Polygonizer produced no output")
        try:
            geometry = wkt.loads(text)
        except (ShapelyError, ValueError) as e:
            raise PartitionFailed(f"Cannot parse polygonizer output: {e}") from e

        if geometry.is_empty:
            return []
        if geometry.geom_type == "Polygon":
            return [geometry]

        faces = []
        for part in getattr(geometry, "geoms", []):
            if part.geom_type != "Polygon":
                raise PartitionFailed(f"Polygonizer returned a {part.geom_type}, expected polygons")
            faces.append(part)
        if not faces:
            raise PartitionFailed(f"Polygonizer returned a {geometry.geom_type}, expected polygons")
        return faces


def build_polygonizer(config: Optional[PolygonizerConfig] = None):
    """External polygonizer when a command is configured, shapely otherwise"""
    if config is not None and config.command:
        return ExternalPolygonizer(config.command, config.timeout_s, config.temp_prefix)
    return ShapelyPolygonizer()
