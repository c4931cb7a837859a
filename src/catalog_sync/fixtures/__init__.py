"""Synthetic catalog and snapshot generation for testing reconciliation."""

from .generator import DatasetGenerator, GenerationResult, generate_dataset

__all__ = ["DatasetGenerator", "GenerationResult", "generate_dataset"]
