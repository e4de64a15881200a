"""
Configuration settings for Shoreline Change Review
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class PolygonizerConfig:
    """Polygonization backend used by the ring-chord partitioner"""
    # External executable (argv list). None = in-process shapely polygonize
    # The WKT file path is appended as the last argument
    command: Optional[List[str]] = None
    timeout_s: float = 120.0
    temp_prefix: str = "shoreline-polygonize-"


@dataclass
class OutputConfig:
    """Output settings"""
    indent: Optional[int] = None
    ensure_ascii: bool = False


@dataclass
class ReviewConfig:
    """Review pipeline configuration"""
    # Default inputs when the CLI gets no positional arguments
    detected_path: str = "tests/data/detected.geojson"
    baseline_path: str = "tests/data/baseline.geojson"

    # Restrict the baseline network to the detected envelope before
    # the quantitative review
    clip_baseline: bool = True

    # Feature flags
    enable_quantitative: bool = True

    polygonizer: PolygonizerConfig = field(default_factory=PolygonizerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


# Global config instance
config = ReviewConfig()


def get_config() -> ReviewConfig:
    """Get global configuration"""
    return config


def validate_config(config: ReviewConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if not config.detected_path:
        errors.append("detected_path is required in config but not set")
    if not config.baseline_path:
        errors.append("baseline_path is required in config but not set")

    if config.polygonizer is None:
        errors.append("polygonizer configuration is required but not set")
    else:
        command = config.polygonizer.command
        if command is not None and (not command or not all(isinstance(c, str) and c for c in command)):
            errors.append(f"polygonizer.command must be a non-empty list of strings, got {command!r}")
        if config.polygonizer.timeout_s is None or config.polygonizer.timeout_s <= 0:
            errors.append(f"polygonizer.timeout_s must be positive, got {config.polygonizer.timeout_s}")

    if config.output is not None and config.output.indent is not None and config.output.indent < 0:
        errors.append(f"output.indent must be non-negative, got {config.output.indent}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
