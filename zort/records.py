"""
Parsed input records and the jobs built from them.

A ``BenchmarkRecord`` identifies a benchmark in its original submission
order, a ``RunRecord`` carries the measurements of one prior monitored run
(one line of the ``zummary`` file).  Matching pairs them into ``Job`` objects,
which are the only records the planning stages mutate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import zort.constants as c


@dataclass(frozen=True)
class BenchmarkRecord:
  """
  One benchmark entry.

  Parameters
  ----------
  order:
      Position of the benchmark in the original submission.
  name:
      Unique key used to pair the benchmark with its zummary entry.
  path:
      Optional directory the benchmark lives in.
  """

  order: int
  name: str
  path: Optional[str] = None

  def __post_init__(self) -> None:
    order = int(self.order)
    if order < 0:
      raise ValueError(f"benchmark order must be non-negative (got {order})")
    object.__setattr__(self, "order", order)
    object.__setattr__(self, "name", str(self.name))
    if self.path is not None:
      object.__setattr__(self, "path", str(self.path))


@dataclass(frozen=True)
class RunLimits:
  """Resource ceilings the monitored run was capped at."""

  time: float
  real: float
  memory: float

  def __post_init__(self) -> None:
    object.__setattr__(self, "time", float(self.time))
    object.__setattr__(self, "real", float(self.real))
    object.__setattr__(self, "memory", float(self.memory))


@dataclass(frozen=True)
class RunRecord:
  """
  Measurements of one benchmark run.

  ``time`` is CPU seconds, ``real`` wall-clock seconds and ``memory`` the
  peak resident memory in MB.
  """

  name: str
  status: int
  time: float
  real: float
  memory: float
  limit: RunLimits

  def __post_init__(self) -> None:
    object.__setattr__(self, "name", str(self.name))
    object.__setattr__(self, "status", int(self.status))
    object.__setattr__(self, "time", float(self.time))
    object.__setattr__(self, "real", float(self.real))
    object.__setattr__(self, "memory", float(self.memory))
    if not isinstance(self.limit, RunLimits):
      raise TypeError("limit must be a RunLimits instance")

  @property
  def solved(self) -> bool:
    return self.status in c.solved_statuses

  @property
  def exceeds_memory_limit(self) -> bool:
    """Return True when the run was killed by or reached its memory cap."""
    return self.status == c.STATUS_MEMORY_LIMIT or self.memory >= self.limit.memory


@dataclass(eq=False)
class Job:
  """
  A benchmark paired with its run.

  ``scheduled`` and ``memory_limit_hit`` are set by the bucket assigner when
  the job is placed, exactly once per job.
  """

  benchmark: BenchmarkRecord
  run: RunRecord
  scheduled: bool = False
  memory_limit_hit: bool = False
  bucket: Optional[int] = field(default=None)

  @property
  def name(self) -> str:
    return self.benchmark.name

  @property
  def order(self) -> int:
    return self.benchmark.order

  @property
  def real(self) -> float:
    return self.run.real

  @property
  def memory(self) -> float:
    return self.run.memory

  @property
  def status(self) -> int:
    return self.run.status

  def mark_scheduled(self, bucket: int) -> None:
    if self.scheduled:
      raise RuntimeError(f"job '{self.name}' is already scheduled in bucket {self.bucket}")
    self.scheduled = True
    self.bucket = bucket
    self.memory_limit_hit = self.run.exceeds_memory_limit
