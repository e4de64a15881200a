"""
Error taxonomy for shoreline review

Every error propagates to the caller unchanged; the pipeline only tags it
with the stage that failed (read, parse, join, clip, qualitative, quantitative).
"""

from typing import Optional


class ShorelineError(Exception):
    """Base class for all review errors"""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage

    def __str__(self) -> str:
        message = super().__str__()
        if self.stage:
            return f"{self.stage}: {message}"
        return message


class InputError(ShorelineError):
    """Unreadable or unparseable input file"""


class TypeMismatch(ShorelineError):
    """GeoJSON object of the wrong kind, or an unsupported geometry type"""


class GeometryOperationFailed(ShorelineError):
    """A geometry engine call failed"""


class PartitionFailed(ShorelineError):
    """Polygonization or ring/face association failed"""


class InvariantViolation(ShorelineError):
    """The face adjacency forest is malformed"""
