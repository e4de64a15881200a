"""
Shoreline Change Review

Compares detected shoreline linework against a baseline survey:
- qualitative: which baseline features were detected, missed or are new
- quantitative: land/water area implied by each linework set
"""

from .config import ReviewConfig, get_config
from .errors import (
    ShorelineError,
    InputError,
    TypeMismatch,
    GeometryOperationFailed,
    PartitionFailed,
    InvariantViolation,
)
from .models import AreaReport, DetectionStatus, FeatureCollection, ReviewResult
from .pipeline import ShorelineReviewPipeline
from .scene import Scene

__all__ = [
    "ReviewConfig",
    "get_config",
    "ShorelineError",
    "InputError",
    "TypeMismatch",
    "GeometryOperationFailed",
    "PartitionFailed",
    "InvariantViolation",
    "AreaReport",
    "DetectionStatus",
    "FeatureCollection",
    "ReviewResult",
    "ShorelineReviewPipeline",
    "Scene",
]
