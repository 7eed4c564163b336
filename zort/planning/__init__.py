"""
Planning stages for re-submitting a benchmark suite.

The objects exported here pack matched jobs into buckets, simulate the
buckets on a pool of nodes and price the result.
"""

from __future__ import annotations

from .buckets import (
  Assignment,
  Bucket,
  BucketAssigner,
  count_tasks,
  fast_bucket_limit,
  last_bucket_size,
)
from .cost import CostModel, CostReport
from .nodes import Node, NodeScheduler, Placement, Schedule
from .ordering import memory_key, sort_by_memory, sort_by_time, sort_unscheduled, time_key

__all__ = [
  "Assignment",
  "Bucket",
  "BucketAssigner",
  "count_tasks",
  "fast_bucket_limit",
  "last_bucket_size",
  "CostModel",
  "CostReport",
  "Node",
  "NodeScheduler",
  "Placement",
  "Schedule",
  "memory_key",
  "sort_by_memory",
  "sort_by_time",
  "sort_unscheduled",
  "time_key",
]
