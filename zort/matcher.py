"""
Join benchmark entries with their zummary runs.

Every run must name a known benchmark and every benchmark must have a run;
the join is a bijection or the whole plan is rejected.  Names are looked up
through dictionaries, and a name that appears twice on either side is
rejected as well since it would make the pairing ambiguous.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, TypeVar

from zort.errors import MatchingError
from zort.records import BenchmarkRecord, Job, RunRecord

_Record = TypeVar("_Record", BenchmarkRecord, RunRecord)


def _index_by_name(records: Sequence[_Record], source: str) -> Dict[str, _Record]:
  index: Dict[str, _Record] = {}
  for record in records:
    if record.name in index:
      raise MatchingError(f"duplicate entry '{record.name}' in {source}")
    index[record.name] = record
  return index


def match_records(
  benchmarks: Sequence[BenchmarkRecord],
  runs: Sequence[RunRecord],
) -> List[Job]:
  """
  Pair every benchmark with the run of the same name.

  Returns
  -------
  list of Job
      One unscheduled job per benchmark, in the order the benchmarks were
      given.

  Raises
  ------
  MatchingError
      If a run has no benchmark, a benchmark has no run, a name occurs
      twice, or the two inputs differ in size.
  """
  benchmark_index = _index_by_name(benchmarks, "benchmarks")
  run_index = _index_by_name(runs, "zummary")

  for run in runs:
    if run.name not in benchmark_index:
      raise MatchingError(f"could not find zummary entry '{run.name}' in benchmarks")

  jobs: List[Job] = []
  for benchmark in benchmarks:
    run = run_index.get(benchmark.name)
    if run is None:
      raise MatchingError(f"could not find benchmark entry '{benchmark.name}' in zummary")
    jobs.append(Job(benchmark=benchmark, run=run))

  if len(benchmarks) != len(runs):
    raise MatchingError(
      f"found {len(benchmarks)} benchmarks but {len(runs)} zummary entries"
    )

  return jobs
