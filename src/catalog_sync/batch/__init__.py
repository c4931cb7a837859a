"""Batch phase: update replay and deletion of uncovered products."""

from .executor import BatchExecutor

__all__ = ["BatchExecutor"]
