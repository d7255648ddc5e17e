"""
Acceleration Module

Process-pool execution for the embarrassingly parallel parts of the pipeline:
per-scan fingerprints and per-pair alignment attempts.
"""

from .parallel_executor import PairParallelExecutor

__all__ = [
    "PairParallelExecutor",
]
