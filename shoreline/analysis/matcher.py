"""
Feature matching - pairs baseline features with detected linework

Each baseline feature takes the first detected line that has the same
closedness and is not disjoint from it. Matched lines leave the candidate
pool; whatever is left over becomes a new detection.
"""

import copy
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from loguru import logger
from pydantic import ValidationError
from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry

from ..errors import GeometryOperationFailed, TypeMismatch
from ..geometry import (
    from_shapely,
    is_closed,
    line_string_from_geometry,
    to_shapely,
    vertex_distances,
)
from ..models import (
    DetectionStatus,
    Feature,
    FeatureCollection,
    OffsetStatistics,
    PropertyKey,
)


def offset_statistics(distances: Sequence[float]) -> OffsetStatistics:
    """Mean and median of a set of offsets"""
    data = np.asarray(distances, dtype=float)
    if data.size == 0:
        raise GeometryOperationFailed("Cannot summarize an empty set of offsets")
    return OffsetStatistics(mean=float(np.mean(data)), median=float(np.median(data)))


class FeatureMatcher:
    """
    Qualitative comparison of baseline features against detected lines

    Usage:
        matcher = FeatureMatcher()
        collection = matcher.match(baseline.features(), detected.geometries())
    """

    def match(
        self,
        baseline_features: Sequence[Dict[str, Any]],
        candidates: Sequence[BaseGeometry]
    ) -> FeatureCollection:
        """
        Match every baseline feature, then emit leftovers as new detections

        The caller's candidate sequence is not modified.
        """
        pool = list(candidates)
        matched = []
        for feature in baseline_features:
            matched.append(self.match_feature(feature, pool))

        detected_count = len(candidates) - len(pool)
        for geometry in pool:
            matched.append(Feature(
                geometry=from_shapely(geometry),
                properties={PropertyKey.DETECTION.value: DetectionStatus.NEW_DETECTION.value}
            ))

        logger.info(
            f"Matched {detected_count} of {len(baseline_features)} baseline features; "
            f"{len(pool)} new detections"
        )
        return FeatureCollection(features=matched)

    def match_feature(self, feature: Dict[str, Any], pool: List[BaseGeometry]) -> Feature:
        """
        Match one baseline feature against the pool

        On a match the detected geometry is removed from the pool.
        """
        baseline_geometry = line_string_from_geometry(to_shapely(feature))
        baseline_closed = is_closed(baseline_geometry)

        index = self._find_candidate(baseline_geometry, baseline_closed, pool)
        if index is None:
            return self._tag(feature, DetectionStatus.UNDETECTED, feature.get("geometry"))

        detected_geometry = pool.pop(index)
        detected_stats = offset_statistics(vertex_distances(detected_geometry, baseline_geometry))
        baseline_stats = offset_statistics(vertex_distances(baseline_geometry, detected_geometry))

        collection = {
            "type": "GeometryCollection",
            "geometries": [copy.deepcopy(feature.get("geometry")), from_shapely(detected_geometry)]
        }
        return self._tag(
            feature,
            DetectionStatus.DETECTED,
            collection,
            {
                PropertyKey.DETECTED_STATS.value: detected_stats.model_dump(),
                PropertyKey.BASELINE_STATS.value: baseline_stats.model_dump(),
            }
        )

    def _find_candidate(
        self,
        baseline_geometry: BaseGeometry,
        baseline_closed: bool,
        pool: List[BaseGeometry]
    ) -> Optional[int]:
        """Index of the first candidate with matching closedness that is not disjoint"""
        if baseline_geometry.is_empty:
            return None
        for inx, candidate in enumerate(pool):
            # To be a match they must both have the same closedness...
            if is_closed(candidate) != baseline_closed:
                continue
            # And somehow overlap each other
            try:
                disjoint = baseline_geometry.disjoint(candidate)
            except ShapelyError as e:
                raise GeometryOperationFailed(f"Disjoint test failed: {e}") from e
            if not disjoint:
                return inx
        return None

    def _tag(
        self,
        feature: Dict[str, Any],
        status: DetectionStatus,
        geometry: Optional[Dict[str, Any]],
        extra: Optional[Dict[str, Any]] = None
    ) -> Feature:
        """Build a fresh output feature carrying the detection status"""
        properties = dict(feature.get("properties") or {})
        # Statistics only ever describe this run's match
        properties.pop(PropertyKey.DETECTED_STATS.value, None)
        properties.pop(PropertyKey.BASELINE_STATS.value, None)
        properties[PropertyKey.DETECTION.value] = status.value
        if extra:
            properties.update(extra)
        try:
            return Feature(
                id=feature.get("id"),
                geometry=copy.deepcopy(geometry),
                properties=properties
            )
        except ValidationError as e:
            raise TypeMismatch(f"Invalid baseline feature: {e}") from e
