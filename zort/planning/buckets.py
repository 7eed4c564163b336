"""
Bucket assignment for benchmark jobs.

A bucket (a cluster task) runs up to ``bucket_size`` jobs side by side, one
job per core.  The assigner partitions the matched jobs into
``ceil(jobs / bucket_size)`` buckets.  In its default mode it works in two
greedy phases:

1. the shortest solved jobs whose memory stays below ``fast_bucket_memory``
   fill the first ``fast_bucket_fraction`` percent of buckets so that this
   share of the tasks finishes early;
2. every remaining job is dealt out round robin over all buckets that still
   have room, largest memory first, which spreads memory evenly instead of
   stacking the heaviest jobs together.

In keep mode the jobs are packed in their original submission order, which
lets callers price an existing assignment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import List, Sequence, TYPE_CHECKING

import zort.constants as c
from zort.errors import EmptyPoolError
from zort.planning.ordering import sort_by_memory, sort_by_time
from zort.records import Job

if TYPE_CHECKING:
  from zort.config import PlannerConfig


@dataclass
class Bucket:
  """Jobs packed into one task together with their running aggregates."""

  index: int
  capacity: int
  jobs: List[Job] = field(default_factory=list)
  real: float = 0.0
  memory: float = 0.0
  memory_limit_hit_count: int = 0
  fast: bool = False

  @property
  def size(self) -> int:
    return len(self.jobs)

  @property
  def is_full(self) -> bool:
    return len(self.jobs) >= self.capacity

  @property
  def max_job_memory(self) -> float:
    return max((job.memory for job in self.jobs), default=0.0)

  def add(self, job: Job) -> None:
    """Append ``job`` and update the bucket's wall time and memory."""
    if self.is_full:
      raise RuntimeError(f"bucket {self.index} is full ({self.capacity} jobs)")
    job.mark_scheduled(self.index)
    self.jobs.append(job)
    self.real = max(self.real, job.real)
    self.memory += job.memory
    if job.memory_limit_hit:
      self.memory_limit_hit_count += 1


@dataclass
class Assignment:
  """Result of :meth:`BucketAssigner.assign`."""

  buckets: List[Bucket]
  bucket_size: int
  last_bucket_size: int
  fast_buckets: int = 0
  fast_jobs: int = 0
  keep: bool = False

  @property
  def tasks(self) -> int:
    return len(self.buckets)

  @property
  def job_count(self) -> int:
    return sum(bucket.size for bucket in self.buckets)

  @property
  def max_memory_limit_hits(self) -> int:
    return max((bucket.memory_limit_hit_count for bucket in self.buckets), default=0)

  @property
  def max_bucket_memory(self) -> float:
    return max((bucket.memory for bucket in self.buckets), default=0.0)

  @property
  def max_job_memory(self) -> float:
    return max((bucket.max_job_memory for bucket in self.buckets), default=0.0)


def count_tasks(job_count: int, bucket_size: int) -> int:
  return (job_count + bucket_size - 1) // bucket_size


def last_bucket_size(job_count: int, bucket_size: int) -> int:
  remainder = job_count % bucket_size
  return remainder if remainder else bucket_size


def fast_bucket_limit(fast_bucket_fraction: float, tasks: int) -> int:
  """Number of buckets reserved for fast jobs, truncated towards zero."""
  return int(math.floor(fast_bucket_fraction * tasks / 100))


class BucketAssigner:
  """
  Partition jobs into fixed-capacity buckets.

  Parameters
  ----------
  bucket_size:
      Number of jobs (cores) per bucket.  Every bucket but the last has
      exactly this capacity; the last one takes the remainder.
  fast_bucket_fraction:
      Percentage of buckets filled only with fast, solved jobs.
  fast_bucket_memory:
      Memory ceiling in MB for jobs admitted to a fast bucket.
  """

  def __init__(
    self,
    bucket_size: int = c.DEFAULT_BUCKET_SIZE,
    *,
    fast_bucket_fraction: float = c.DEFAULT_FAST_BUCKET_FRACTION,
    fast_bucket_memory: float = c.DEFAULT_FAST_BUCKET_MEMORY,
  ) -> None:
    if bucket_size < 1:
      raise ValueError("bucket_size must be at least 1")
    if not 0 <= fast_bucket_fraction <= 100:
      raise ValueError("fast_bucket_fraction must be a percentage between 0 and 100")
    if fast_bucket_memory < 0:
      raise ValueError("fast_bucket_memory must be non-negative")

    self._bucket_size = int(bucket_size)
    self._fast_bucket_fraction = float(fast_bucket_fraction)
    self._fast_bucket_memory = float(fast_bucket_memory)

  @classmethod
  def from_config(cls, config: "PlannerConfig") -> "BucketAssigner":
    return cls(
      config.bucket_size,
      fast_bucket_fraction=config.fast_bucket_fraction,
      fast_bucket_memory=config.fast_bucket_memory,
    )

  @property
  def bucket_size(self) -> int:
    return self._bucket_size

  def is_fast_candidate(self, job: Job) -> bool:
    return job.run.solved and job.memory <= self._fast_bucket_memory

  def assign(self, jobs: Sequence[Job], keep: bool = False) -> Assignment:
    """
    Place every job in exactly one bucket.

    ``jobs`` itself is left in its given order; sorting happens on a private
    copy.  The jobs are marked scheduled as they are placed.
    """
    pool = list(jobs)
    if not pool:
      raise EmptyPoolError("cannot assign buckets without any jobs")
    if any(job.scheduled for job in pool):
      raise ValueError("jobs must be unscheduled before bucket assignment")

    tasks = count_tasks(len(pool), self._bucket_size)
    last = last_bucket_size(len(pool), self._bucket_size)
    buckets = [
      Bucket(index=index, capacity=last if index == tasks - 1 else self._bucket_size)
      for index in range(tasks)
    ]
    assignment = Assignment(
      buckets=buckets,
      bucket_size=self._bucket_size,
      last_bucket_size=last,
      keep=keep,
    )

    if keep:
      self._assign_in_order(pool, buckets)
    else:
      limit = fast_bucket_limit(self._fast_bucket_fraction, tasks)
      assignment.fast_buckets = limit
      assignment.fast_jobs = self._fill_fast_buckets(pool, buckets, limit)
      self._balance_memory(pool, buckets)

    return assignment

  def _assign_in_order(self, pool: List[Job], buckets: List[Bucket]) -> None:
    index = 0
    for job in sorted(pool, key=lambda job: job.order):
      if buckets[index].is_full:
        index += 1
      buckets[index].add(job)

  def _fill_fast_buckets(self, pool: List[Job], buckets: List[Bucket], limit: int) -> int:
    if limit <= 0:
      return 0

    sort_by_time(pool)
    index = 0
    placed = 0
    for job in pool:
      if not self.is_fast_candidate(job):
        continue
      bucket = buckets[index]
      bucket.add(job)
      bucket.fast = True
      placed += 1
      if bucket.is_full:
        index += 1
        if index >= limit:
          break
    return placed

  def _balance_memory(self, pool: List[Job], buckets: List[Bucket]) -> None:
    sort_by_memory(pool)
    remaining = [job for job in reversed(pool) if not job.scheduled]
    if not remaining:
      return

    index = len(buckets) - 1
    if buckets[index].is_full:
      index = self._next_free(buckets, index)
    for count, job in enumerate(remaining, start=1):
      buckets[index].add(job)
      if count == len(remaining):
        break
      index = self._next_free(buckets, index)

  @staticmethod
  def _next_free(buckets: List[Bucket], index: int) -> int:
    """Circular scan for the next bucket after ``index`` that has room."""
    tasks = len(buckets)
    for step in range(1, tasks + 1):
      candidate = (index + step) % tasks
      if not buckets[candidate].is_full:
        return candidate
    raise RuntimeError("no bucket with free capacity left")
