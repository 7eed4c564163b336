from __future__ import annotations

from dataclasses import dataclass
from os import PathLike
from time import perf_counter
from typing import List, Optional, Sequence

import pandas as pd

from zort.config import PlannerConfig
from zort.matcher import match_records
from zort.planning import Assignment, BucketAssigner, CostModel, CostReport, NodeScheduler, Schedule
from zort.readers import ensure_directory, read_benchmarks, read_zummary, zummary_path
from zort.records import BenchmarkRecord, Job, RunRecord


@dataclass
class PlanResult:
  """Everything produced by one planner run."""

  config: PlannerConfig
  jobs: List[Job]
  assignment: Assignment
  schedule: Schedule
  cost: CostReport

  @property
  def latency(self) -> float:
    return self.schedule.latency

  def buckets_frame(self) -> pd.DataFrame:
    placements = self.schedule.by_bucket()
    rows = []
    for bucket in self.assignment.buckets:
      placement = placements[bucket.index]
      rows.append(
        {
          "bucket": bucket.index,
          "jobs": bucket.size,
          "capacity": bucket.capacity,
          "fast": bucket.fast,
          "real": bucket.real,
          "memory": bucket.memory,
          "memory_limit_hits": bucket.memory_limit_hit_count,
          "node": placement.node,
          "start": placement.start,
          "end": placement.end,
        }
      )
    return pd.DataFrame(rows).set_index("bucket")

  def jobs_frame(self) -> pd.DataFrame:
    rows = []
    for bucket in self.assignment.buckets:
      for slot, job in enumerate(bucket.jobs):
        rows.append(
          {
            "bucket": bucket.index,
            "slot": slot,
            "order": job.order,
            "path": job.benchmark.path,
            "name": job.name,
            "status": job.status,
            "real": job.real,
            "memory": job.memory,
            "memory_limit_hit": job.memory_limit_hit,
          }
        )
    return pd.DataFrame(rows)

  def nodes_frame(self) -> pd.DataFrame:
    rows = [
      {
        "node": node.index,
        "buckets": len(node.buckets),
        "available_at": node.available_at,
      }
      for node in self.schedule.nodes
    ]
    return pd.DataFrame(rows).set_index("node")

  def write_assignment(self, path: str | PathLike) -> None:
    """Write the job to bucket table as CSV."""
    self.jobs_frame().to_csv(path, index=False)


class ZORT:
  def __init__(self, config: Optional[PlannerConfig] = None, verbose: bool = True):
    self.config = config if config is not None else PlannerConfig()
    self.verbose = verbose
    self.assigner = BucketAssigner.from_config(self.config)
    self.node_scheduler = NodeScheduler(self.config.size_nodes)
    self.cost_model = CostModel.from_config(self.config)

  def _log(self, message: str) -> None:
    if self.verbose:
      print(message, flush=True)

  def _log_step(self, current: int, total: int, message: str) -> None:
    self._log(f"[{current}/{total}] {message}")

  def _log_duration(self, start_time: float) -> None:
    self._log(f"    Done in {perf_counter() - start_time:.2f} seconds.")

  def run_files(self, benchmarks_path: str | PathLike, directory: str | PathLike) -> PlanResult:
    """Read the benchmark list and the run's zummary, then plan."""
    ensure_directory(directory)
    self._log(f"Reading benchmarks from '{benchmarks_path}'...")
    t1 = perf_counter()
    benchmarks = read_benchmarks(benchmarks_path, progress=self.verbose)
    source = zummary_path(directory)
    self._log(f"Reading zummary from '{source}'...")
    runs = read_zummary(source, progress=self.verbose)
    self._log(f"    Read {len(benchmarks)} benchmarks and {len(runs)} zummary entries.")
    self._log_duration(t1)
    return self.run(benchmarks, runs)

  def run(self, benchmarks: Sequence[BenchmarkRecord], runs: Sequence[RunRecord]) -> PlanResult:
    total_steps = 4
    step = 1

    self._log_step(step, total_steps, 'Matching benchmarks with zummary entries...')
    t1 = perf_counter()
    jobs = match_records(benchmarks, runs)
    self._log_duration(t1)
    step += 1

    if self.config.keep:
      self._log_step(step, total_steps, 'Keeping original order for buckets...')
    else:
      self._log_step(step, total_steps, 'Generating buckets...')
    t1 = perf_counter()
    assignment = self.assigner.assign(jobs, keep=self.config.keep)
    self._log_duration(t1)
    self._log(
      f"    Packed {assignment.job_count} jobs into {assignment.tasks} buckets of size {assignment.bucket_size} "
      f"(last bucket {assignment.last_bucket_size}, {assignment.fast_jobs} jobs in {assignment.fast_buckets} fast buckets)."
    )
    step += 1

    self._log_step(step, total_steps, f'Simulating buckets on {self.config.size_nodes} nodes...')
    t1 = perf_counter()
    schedule = self.node_scheduler.simulate(assignment.buckets)
    self._log_duration(t1)
    step += 1

    self._log_step(step, total_steps, 'Computing cost...')
    t1 = perf_counter()
    cost = self.cost_model.evaluate(assignment)
    self._log_duration(t1)

    return PlanResult(
      config=self.config,
      jobs=jobs,
      assignment=assignment,
      schedule=schedule,
      cost=cost,
    )
