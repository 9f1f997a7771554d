"""Pipeline orchestrators for the slideshow service."""

from slideshow.pipelines.video_pipeline import PipelineGate, PipelineOrchestrator

__all__ = ["PipelineGate", "PipelineOrchestrator"]
