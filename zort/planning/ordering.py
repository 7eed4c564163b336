"""
Orderings over the jobs that still wait for a bucket.

Both sorts only permute the unscheduled jobs among the positions they
already occupy; scheduled jobs keep their slots and never take part in a
comparison.  Python's sort is stable, so jobs equal on both keys keep their
relative order and repeated runs give the same sequence.
"""

from __future__ import annotations

from typing import Callable, MutableSequence, Tuple

from zort.records import Job

SortKey = Callable[[Job], Tuple[float, float]]


def time_key(job: Job) -> Tuple[float, float]:
  """Wall time first, smaller memory wins among equal times."""
  return job.real, job.memory


def memory_key(job: Job) -> Tuple[float, float]:
  """Memory first, shorter wall time wins among equal memory."""
  return job.memory, job.real


def sort_unscheduled(jobs: MutableSequence[Job], key: SortKey) -> None:
  """Sort the unscheduled jobs of ``jobs`` in place by ``key``."""
  positions = [index for index, job in enumerate(jobs) if not job.scheduled]
  ordered = sorted((jobs[index] for index in positions), key=key)
  for index, job in zip(positions, ordered):
    jobs[index] = job


def sort_by_time(jobs: MutableSequence[Job]) -> None:
  sort_unscheduled(jobs, time_key)


def sort_by_memory(jobs: MutableSequence[Job]) -> None:
  sort_unscheduled(jobs, memory_key)
