"""
Main Pipeline Orchestrator for Shoreline Change Review

Stages:

  1. read: Load the detected and baseline GeoJSON files
  2. parse: Parse them into scenes
  3. join: Merge the detected linework into candidate lines
  4. clip: Restrict the baseline network, and the features scored, to the
     detected envelope
  5. qualitative: Classify baseline features as Detected / Undetected,
     leftover detections as New Detection
  6. quantitative: Partition each network into faces and total the
     positive/negative areas

The first error aborts the run; it is re-raised tagged with its stage.
"""

import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from loguru import logger
from shapely.errors import ShapelyError

from .analysis import FeatureMatcher, PolarityGrapher, RingChordPartitioner, build_polygonizer
from .config import ReviewConfig, get_config, validate_config
from .errors import GeometryOperationFailed, ShorelineError
from .geometry import parse_geojson, read_geojson_bytes
from .models import AreaReport, DetectionStatus, ReviewResult
from .scene import Scene


@contextmanager
def stage(name: str):
    """Tag errors raised inside the block with the pipeline stage"""
    try:
        yield
    except ShorelineError as e:
        if e.stage is None:
            e.stage = name
        raise
    except ShapelyError as e:
        raise GeometryOperationFailed(str(e), stage=name) from e


class ShorelineReviewPipeline:
    """
    Compare a detected shoreline against a baseline survey

    Usage:
        pipeline = ShorelineReviewPipeline()
        result = pipeline.run("detected.geojson", "baseline.geojson")
        print(pipeline.dumps(result))
    """

    def __init__(self, config: Optional[ReviewConfig] = None):
        self.config = config or get_config()
        validate_config(self.config)

        self.matcher = FeatureMatcher()
        self.partitioner = RingChordPartitioner(build_polygonizer(self.config.polygonizer))
        self.grapher = PolarityGrapher()

    def load_scene(self, path: Union[str, Path], name: str) -> Scene:
        """Read and parse one GeoJSON file"""
        with stage("read"):
            data = read_geojson_bytes(path)
        with stage("parse"):
            scene = Scene(parse_geojson(data), name=name)
        logger.info(f"Loaded {name} scene from {path}")
        return scene

    def run(
        self,
        detected_path: Optional[Union[str, Path]] = None,
        baseline_path: Optional[Union[str, Path]] = None
    ) -> ReviewResult:
        """
        Run the review

        Args:
            detected_path: Detected shoreline GeoJSON (default from config)
            baseline_path: Baseline shoreline GeoJSON (default from config)

        Returns:
            ReviewResult with the matched feature collection and area reports
        """
        detected = self.load_scene(detected_path or self.config.detected_path, "detected")
        baseline = self.load_scene(baseline_path or self.config.baseline_path, "baseline")
        return self.review(detected, baseline)

    def review(self, detected: Scene, baseline: Scene) -> ReviewResult:
        """Run the join, clip, qualitative and quantitative stages on loaded scenes"""
        with stage("join"):
            candidates = detected.geometries()
        logger.info(f"Joined detected linework into {len(candidates)} lines")

        if self.config.clip_baseline:
            with stage("clip"):
                baseline.clip(detected)

        with stage("qualitative"):
            features = self.matcher.match(baseline.scored_features(), candidates)
        logger.info(
            f"Qualitative review: "
            f"{features.count(DetectionStatus.DETECTED)} detected, "
            f"{features.count(DetectionStatus.UNDETECTED)} undetected, "
            f"{features.count(DetectionStatus.NEW_DETECTION)} new"
        )

        result = ReviewResult(features=features)
        if self.config.enable_quantitative:
            with stage("quantitative"):
                result.detected_areas = self.quantitative_review(detected)
                result.baseline_areas = self.quantitative_review(baseline)
        return result

    def quantitative_review(self, scene: Scene) -> AreaReport:
        """Partition a scene's network and total its positive/negative areas"""
        polygons = self.partitioner.partition(scene.network())
        report = self.grapher.review(polygons)
        logger.info(f"{scene.name} {report.summary()}")
        return report

    def dumps(self, result: ReviewResult) -> str:
        """Serialize the feature collection as a GeoJSON document"""
        return json.dumps(
            result.features.to_geojson(),
            indent=self.config.output.indent,
            ensure_ascii=self.config.output.ensure_ascii
        )

    def save(self, result: ReviewResult, output_path: str) -> str:
        """Save the feature collection to a GeoJSON file"""
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.dumps(result))

        logger.info(f"Saved review to {output_path}")
        return output_path

    def save_areas(self, result: ReviewResult, output_path: str) -> str:
        """Save the quantitative reports to a JSON file"""
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        areas = {
            "detected": result.detected_areas.model_dump() if result.detected_areas else None,
            "baseline": result.baseline_areas.model_dump() if result.baseline_areas else None,
        }
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(areas, f, indent=2, ensure_ascii=False)

        logger.info(f"Saved area report to {output_path}")
        return output_path
