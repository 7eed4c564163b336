"""
Plan the re-submission of a benchmark suite to a batch cluster.

Previously measured wall time and memory of every benchmark are used to
pack the jobs into buckets, simulate the buckets on a pool of nodes and
estimate latency, core time, energy and cost.
"""

from __future__ import annotations

from .config import PlannerConfig
from .errors import ConfigurationError, EmptyPoolError, InputError, MatchingError, ZortError
from .matcher import match_records
from .readers import read_benchmarks, read_zummary
from .records import BenchmarkRecord, Job, RunLimits, RunRecord
from .zort import PlanResult, ZORT

__all__ = [
  "PlannerConfig",
  "ConfigurationError",
  "EmptyPoolError",
  "InputError",
  "MatchingError",
  "ZortError",
  "match_records",
  "read_benchmarks",
  "read_zummary",
  "BenchmarkRecord",
  "Job",
  "RunLimits",
  "RunRecord",
  "PlanResult",
  "ZORT",
]
