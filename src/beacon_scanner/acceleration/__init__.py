"""
Acceleration Module

Process-based parallel execution for independent scanner-pair work.
"""

from .parallel_executor import PairParallelExecutor

__all__ = ["PairParallelExecutor"]
