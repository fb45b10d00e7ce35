"""Parsed command-line structures for liteshell."""

from .types import PipelineSpec, RedirectionSpec

__all__ = ["PipelineSpec", "RedirectionSpec"]
