"""
Models for shoreline review output
Matches the GeoJSON feature collection written by the CLI
"""

from enum import Enum
from typing import List, Optional, Dict, Any, Literal, Union
from pydantic import BaseModel, Field


# ============================================================
# Property schema
# ============================================================

class DetectionStatus(str, Enum):
    """Match status of a feature relative to the other dataset"""
    DETECTED = "Detected"
    UNDETECTED = "Undetected"
    NEW_DETECTION = "New Detection"


class PropertyKey(str, Enum):
    """Keys written into output feature properties"""
    DETECTION = "detection"
    # Offsets from the detected vertices to the baseline linestring
    DETECTED_STATS = "detected_stats"
    # Offsets from the baseline vertices to the detected linestring
    BASELINE_STATS = "baseline_stats"


class StatisticKey(str, Enum):
    MEAN = "mean"
    MEDIAN = "median"


# ============================================================
# GeoJSON output
# ============================================================

class OffsetStatistics(BaseModel):
    mean: float
    median: float


class Feature(BaseModel):
    type: Literal["Feature"] = "Feature"
    id: Optional[Union[str, int, float]] = None
    geometry: Optional[Dict[str, Any]] = None
    properties: Dict[str, Any] = Field(default_factory=dict)

    @property
    def detection(self) -> Optional[DetectionStatus]:
        value = self.properties.get(PropertyKey.DETECTION.value)
        return DetectionStatus(value) if value is not None else None

    def to_geojson(self) -> Dict[str, Any]:
        data = {"type": self.type, "geometry": self.geometry, "properties": self.properties}
        if self.id is not None:
            data["id"] = self.id
        return data


class FeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[Feature] = Field(default_factory=list)

    def count(self, status: DetectionStatus) -> int:
        """Number of features tagged with the given status"""
        return sum(1 for f in self.features if f.detection == status)

    def to_geojson(self) -> Dict[str, Any]:
        return {"type": self.type, "features": [f.to_geojson() for f in self.features]}


# ============================================================
# Quantitative review
# ============================================================

class AreaReport(BaseModel):
    """Aggregate land/water area implied by one linework set"""
    positive: float
    negative: float
    difference: float
    total: float
    face_count: int = 0

    @classmethod
    def from_areas(cls, positive: float, negative: float, face_count: int = 0) -> "AreaReport":
        return cls(
            positive=positive,
            negative=negative,
            difference=positive - negative,
            total=positive + negative,
            face_count=face_count
        )

    def summary(self) -> str:
        return f"+:{self.positive} -:{self.negative} Sum: {self.difference} Total:{self.total}"


class ReviewResult(BaseModel):
    """Everything one pipeline run produces"""
    features: FeatureCollection
    detected_areas: Optional[AreaReport] = None
    baseline_areas: Optional[AreaReport] = None
