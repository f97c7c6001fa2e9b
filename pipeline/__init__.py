"""Pipeline execution modules for match generation."""

from .runner import run_generation_pipeline, GenerationPipelineResult

__all__ = ['run_generation_pipeline', 'GenerationPipelineResult']
