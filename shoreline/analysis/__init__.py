"""
Analysis modules for Shoreline Change Review

- RingChordPartitioner: line network -> faces with holes
- PolarityGrapher: face adjacency forest -> land/water areas
- FeatureMatcher: baseline vs detected feature classification
"""

from .partitioner import RingChordPartitioner
from .polarity import Face, PolarityGrapher
from .matcher import FeatureMatcher, offset_statistics
from .polygonizer import ExternalPolygonizer, ShapelyPolygonizer, build_polygonizer

__all__ = [
    "RingChordPartitioner",
    "Face",
    "PolarityGrapher",
    "FeatureMatcher",
    "offset_statistics",
    "ExternalPolygonizer",
    "ShapelyPolygonizer",
    "build_polygonizer",
]
