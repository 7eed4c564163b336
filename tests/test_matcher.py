from __future__ import annotations

import pytest

from zort.errors import MatchingError
from zort.matcher import match_records
from zort.records import BenchmarkRecord, RunLimits, RunRecord


def _benchmark(order: int, name: str) -> BenchmarkRecord:
  return BenchmarkRecord(order=order, name=name, path=f"suite/{name}")


def _run(name: str, *, status: int = 10, memory: float = 100.0) -> RunRecord:
  return RunRecord(
    name=name,
    status=status,
    time=1.0,
    real=2.0,
    memory=memory,
    limit=RunLimits(time=5000.0, real=5000.0, memory=8000.0),
  )


def test_match_pairs_every_benchmark_with_its_run() -> None:
  benchmarks = [_benchmark(0, "a"), _benchmark(1, "b"), _benchmark(2, "c")]
  runs = [_run("c"), _run("a"), _run("b")]

  jobs = match_records(benchmarks, runs)

  assert [job.name for job in jobs] == ["a", "b", "c"]
  for job in jobs:
    assert job.benchmark.name == job.run.name
    assert job.scheduled is False
    assert job.memory_limit_hit is False
    assert job.bucket is None


def test_match_rejects_run_without_benchmark() -> None:
  benchmarks = [_benchmark(0, "a")]
  runs = [_run("a"), _run("z")]

  with pytest.raises(MatchingError, match="could not find zummary entry 'z' in benchmarks"):
    match_records(benchmarks, runs)


def test_match_rejects_benchmark_without_run() -> None:
  benchmarks = [_benchmark(0, "a"), _benchmark(1, "b")]
  runs = [_run("a")]

  with pytest.raises(MatchingError, match="could not find benchmark entry 'b' in zummary"):
    match_records(benchmarks, runs)


def test_match_rejects_duplicate_names() -> None:
  benchmarks = [_benchmark(0, "a"), _benchmark(1, "a")]
  runs = [_run("a")]

  with pytest.raises(MatchingError, match="duplicate entry 'a' in benchmarks"):
    match_records(benchmarks, runs)

  with pytest.raises(MatchingError, match="duplicate entry 'a' in zummary"):
    match_records([_benchmark(0, "a")], [_run("a"), _run("a")])


def test_match_errors_are_value_errors() -> None:
  with pytest.raises(ValueError):
    match_records([_benchmark(0, "a")], [])


def test_memory_limit_flag_follows_status_and_limit() -> None:
  jobs = match_records(
    [_benchmark(0, "ok"), _benchmark(1, "killed"), _benchmark(2, "at_limit")],
    [_run("ok"), _run("killed", status=2), _run("at_limit", memory=8000.0)],
  )

  for index, job in enumerate(jobs):
    job.mark_scheduled(index)

  flags = {job.name: job.memory_limit_hit for job in jobs}
  assert flags == {"ok": False, "killed": True, "at_limit": True}


def test_job_cannot_be_scheduled_twice() -> None:
  job = match_records([_benchmark(0, "a")], [_run("a")])[0]
  job.mark_scheduled(0)
  with pytest.raises(RuntimeError):
    job.mark_scheduled(1)
