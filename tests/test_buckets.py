from __future__ import annotations

from typing import List, Sequence, Tuple

import pytest

from zort.errors import EmptyPoolError
from zort.planning import BucketAssigner, count_tasks, fast_bucket_limit, last_bucket_size
from zort.planning.buckets import Bucket
from zort.records import BenchmarkRecord, Job, RunLimits, RunRecord


def _job(
  name: str,
  *,
  order: int = 0,
  status: int = 10,
  real: float = 1.0,
  memory: float = 100.0,
) -> Job:
  return Job(
    benchmark=BenchmarkRecord(order=order, name=name),
    run=RunRecord(
      name=name,
      status=status,
      time=real,
      real=real,
      memory=memory,
      limit=RunLimits(time=5000.0, real=5000.0, memory=16_000.0),
    ),
  )


def _jobs(specs: Sequence[Tuple[float, float]], *, status: int = 10) -> List[Job]:
  return [
    _job(f"j{index}", order=index, status=status, real=real, memory=memory)
    for index, (real, memory) in enumerate(specs)
  ]


def _names(bucket: Bucket) -> List[str]:
  return [job.name for job in bucket.jobs]


def _mixed_pool(count: int) -> List[Job]:
  statuses = (10, 20, 30, 2)
  return [
    _job(
      f"m{index}",
      order=index,
      status=statuses[index % len(statuses)],
      real=float((index * 37) % 101),
      memory=float((index * 53) % 997) * 20.0,
    )
    for index in range(count)
  ]


def test_bucket_counts() -> None:
  assert count_tasks(130, 64) == 3
  assert last_bucket_size(130, 64) == 2
  assert count_tasks(128, 64) == 2
  assert last_bucket_size(128, 64) == 64
  assert fast_bucket_limit(50, 3) == 1
  assert fast_bucket_limit(50, 1) == 0
  assert fast_bucket_limit(100, 7) == 7


def test_last_bucket_capacity_is_used_when_balancing() -> None:
  jobs = _jobs([(float(index + 1), 100.0) for index in range(130)])

  assignment = BucketAssigner(64).assign(jobs)

  assert assignment.tasks == 3
  assert assignment.last_bucket_size == 2
  assert [bucket.size for bucket in assignment.buckets] == [64, 64, 2]
  assert [bucket.capacity for bucket in assignment.buckets] == [64, 64, 2]
  assert assignment.fast_buckets == 1
  assert assignment.fast_jobs == 64

  fast, balanced, last = assignment.buckets
  assert fast.fast is True
  assert max(job.real for job in fast.jobs) == 64.0
  assert _names(last) == ["j129", "j127"]
  assert balanced.real == 129.0
  assert last.real == 130.0


def test_unsolved_jobs_skip_fast_phase() -> None:
  jobs = _jobs([(1.0, 10.0), (2.0, 20.0), (3.0, 30.0), (4.0, 40.0), (5.0, 50.0), (6.0, 60.0)], status=30)

  assignment = BucketAssigner(2, fast_bucket_fraction=50).assign(jobs)

  assert assignment.fast_buckets == 1
  assert assignment.fast_jobs == 0
  assert not any(bucket.fast for bucket in assignment.buckets)
  assert _names(assignment.buckets[0]) == ["j4", "j1"]
  assert _names(assignment.buckets[1]) == ["j3", "j0"]
  assert _names(assignment.buckets[2]) == ["j5", "j2"]
  assert [bucket.memory for bucket in assignment.buckets] == [70.0, 50.0, 90.0]


def test_zero_fast_fraction_skips_fast_phase() -> None:
  jobs = _jobs([(float(index), 10.0) for index in range(10)])

  assignment = BucketAssigner(4, fast_bucket_fraction=0).assign(jobs)

  assert assignment.fast_buckets == 0
  assert assignment.fast_jobs == 0
  assert not any(bucket.fast for bucket in assignment.buckets)
  assert assignment.job_count == 10


def test_fast_phase_only_admits_solved_small_jobs() -> None:
  jobs = [
    _job("timeout", status=30, real=1.0, memory=10.0),
    _job("large", status=10, real=2.0, memory=9000.0),
    _job("sat", status=10, real=3.0, memory=10.0),
    _job("unsat", status=20, real=4.0, memory=10.0),
    _job("later", status=10, real=5.0, memory=10.0),
    _job("last", status=20, real=6.0, memory=10.0),
  ]

  assignment = BucketAssigner(2, fast_bucket_fraction=50, fast_bucket_memory=8000).assign(jobs)

  fast = assignment.buckets[0]
  assert fast.fast is True
  assert _names(fast) == ["sat", "unsat"]
  assert _names(assignment.buckets[1]) == ["last", "timeout"]
  assert _names(assignment.buckets[2]) == ["large", "later"]


def test_full_fast_fraction_respects_last_bucket_capacity() -> None:
  jobs = _jobs([(float(index), 10.0) for index in range(5)])

  assignment = BucketAssigner(2, fast_bucket_fraction=100).assign(jobs)

  assert assignment.fast_buckets == 3
  assert assignment.fast_jobs == 5
  assert [bucket.size for bucket in assignment.buckets] == [2, 2, 1]
  assert _names(assignment.buckets[2]) == ["j4"]


def test_keep_mode_preserves_submission_order() -> None:
  jobs = [
    _job("c", order=2, real=9.0),
    _job("a", order=0, real=1.0),
    _job("e", order=4, real=3.0),
    _job("b", order=1, real=7.0),
    _job("d", order=3, real=5.0),
  ]

  assignment = BucketAssigner(2).assign(jobs, keep=True)

  assert assignment.keep is True
  assert assignment.fast_buckets == 0
  assert [_names(bucket) for bucket in assignment.buckets] == [["a", "b"], ["c", "d"], ["e"]]
  assert [bucket.real for bucket in assignment.buckets] == [7.0, 9.0, 3.0]
  assert [job.name for job in jobs] == ["c", "a", "e", "b", "d"]


def test_partition_invariant_holds() -> None:
  jobs = _mixed_pool(200)

  assignment = BucketAssigner(16, fast_bucket_fraction=30, fast_bucket_memory=8000).assign(jobs)

  seen = [job.name for bucket in assignment.buckets for job in bucket.jobs]
  assert sorted(seen) == sorted(job.name for job in jobs)
  assert len(seen) == len(set(seen))
  assert assignment.job_count == 200
  assert all(job.scheduled for job in jobs)
  for bucket in assignment.buckets:
    assert bucket.size <= bucket.capacity
    assert bucket.real == max(job.real for job in bucket.jobs)
    assert bucket.memory == pytest.approx(sum(job.memory for job in bucket.jobs))
    assert bucket.memory_limit_hit_count == sum(1 for job in bucket.jobs if job.memory_limit_hit)
    assert all(job.bucket == bucket.index for job in bucket.jobs)
    if bucket.fast:
      assert bucket.index < assignment.fast_buckets


def test_fast_buckets_hold_only_eligible_jobs() -> None:
  kinds = ((10, 100.0), (30, 100.0), (20, 200.0), (10, 9000.0))
  jobs = [
    _job(f"k{index}", order=index, status=kinds[index % 4][0], real=float((index * 7) % 64), memory=kinds[index % 4][1])
    for index in range(64)
  ]

  assignment = BucketAssigner(8, fast_bucket_fraction=50, fast_bucket_memory=8000).assign(jobs)

  assert assignment.fast_buckets == 4
  assert assignment.fast_jobs == 32
  for bucket in assignment.buckets[:4]:
    assert bucket.fast is True
    assert all(job.status in (10, 20) and job.memory <= 8000 for job in bucket.jobs)
  for bucket in assignment.buckets[4:]:
    assert bucket.fast is False
    assert all(job.status == 30 or job.memory > 8000 for job in bucket.jobs)


def test_assignment_is_deterministic() -> None:
  first = BucketAssigner(16).assign(_mixed_pool(150))
  second = BucketAssigner(16).assign(_mixed_pool(150))

  assert [_names(bucket) for bucket in first.buckets] == [_names(bucket) for bucket in second.buckets]
  assert [bucket.memory for bucket in first.buckets] == [bucket.memory for bucket in second.buckets]


def test_memory_limit_hits_are_counted() -> None:
  jobs = [
    _job("killed", status=2, real=1.0, memory=500.0),
    _job("capped", status=30, real=1.0, memory=16_000.0),
    _job("fine", status=10, real=1.0, memory=10.0),
  ]

  assignment = BucketAssigner(4, fast_bucket_fraction=0).assign(jobs)

  assert assignment.tasks == 1
  assert assignment.buckets[0].memory_limit_hit_count == 2
  assert assignment.max_memory_limit_hits == 2
  assert assignment.max_job_memory == 16_000.0
  assert assignment.max_bucket_memory == 16_510.0


def test_empty_pool_is_rejected() -> None:
  with pytest.raises(EmptyPoolError):
    BucketAssigner(64).assign([])


def test_invalid_settings_are_rejected() -> None:
  with pytest.raises(ValueError):
    BucketAssigner(0)
  with pytest.raises(ValueError):
    BucketAssigner(8, fast_bucket_fraction=120)
  with pytest.raises(ValueError):
    BucketAssigner(8, fast_bucket_memory=-1)


def test_full_bucket_refuses_jobs() -> None:
  bucket = Bucket(index=0, capacity=1)
  bucket.add(_job("a"))
  with pytest.raises(RuntimeError):
    bucket.add(_job("b"))
