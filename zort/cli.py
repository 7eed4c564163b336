"""Command line front end: ``zort [options] <benchmarks> <directory>``."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Sequence

import zort.constants as c
from zort.config import PlannerConfig
from zort.errors import ZortError
from zort.zort import PlanResult, ZORT


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog='zort',
    description='Pack previously run benchmarks into cluster buckets and estimate latency and cost',
  )
  parser.add_argument('benchmarks', help='Benchmark list with one "order [path] name" entry per line')
  parser.add_argument('directory', help='Run directory containing the zummary file')
  parser.add_argument('-b', '--bucket-size', dest='bucket_size', type=int, default=c.DEFAULT_BUCKET_SIZE,
                      help='Jobs (cores) per bucket (default: %(default)s)')
  parser.add_argument('-f', '--fast-bucket-fraction', dest='fast_bucket_fraction', type=float,
                      default=c.DEFAULT_FAST_BUCKET_FRACTION,
                      help='Percentage of buckets reserved for fast jobs (default: %(default)s)')
  parser.add_argument('-m', '--fast-bucket-memory', dest='fast_bucket_memory', type=float,
                      default=c.DEFAULT_FAST_BUCKET_MEMORY,
                      help='Memory limit in MB for jobs in fast buckets (default: %(default)s)')
  parser.add_argument('-n', '--size-nodes', dest='size_nodes', type=int, default=c.DEFAULT_SIZE_NODES,
                      help='Number of cluster nodes (default: %(default)s)')
  parser.add_argument('-M', '--size-memory', dest='size_memory', type=float, default=c.DEFAULT_SIZE_MEMORY,
                      help='Memory per node in MB (default: %(default)s)')
  parser.add_argument('-w', '--watt-per-core', dest='watt_per_core', type=float, default=c.DEFAULT_WATT_PER_CORE,
                      help='Power per core in watt (default: %(default)s)')
  parser.add_argument('-c', '--cents-per-kwh', dest='cents_per_kwh', type=float, default=c.DEFAULT_CENTS_PER_KWH,
                      help='Electricity price in cents per kWh (default: %(default)s)')
  parser.add_argument('-k', '--keep', dest='keep', action='store_true',
                      help='Keep the original benchmark order instead of generating buckets')
  currency = parser.add_mutually_exclusive_group()
  currency.add_argument('--euro', dest='currency', action='store_const', const='euro',
                        help='Report cost in euro (default)')
  currency.add_argument('--dollar', dest='currency', action='store_const', const='dollar',
                        help='Report cost in dollar')
  parser.set_defaults(currency=c.DEFAULT_CURRENCY)
  parser.add_argument('-o', '--output', dest='output', default=None,
                      help='Write the job to bucket assignment as CSV')
  parser.add_argument('--show-buckets', dest='show_buckets', action='store_true',
                      help='Print one line per bucket with its node placement')
  parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
                      help='Do not print progress messages')
  return parser


def config_from_args(args: argparse.Namespace) -> PlannerConfig:
  return PlannerConfig(
    bucket_size=args.bucket_size,
    fast_bucket_fraction=args.fast_bucket_fraction,
    fast_bucket_memory=args.fast_bucket_memory,
    size_nodes=args.size_nodes,
    size_memory=args.size_memory,
    watt_per_core=args.watt_per_core,
    cents_per_kwh=args.cents_per_kwh,
    keep=args.keep,
    currency=args.currency,
  )


def format_report(result: PlanResult) -> List[str]:
  config = result.config
  assignment = result.assignment
  cost = result.cost
  lines = [
    f"jobs: {assignment.job_count}",
    f"buckets: {assignment.tasks} of size {assignment.bucket_size} (last bucket {assignment.last_bucket_size})",
  ]
  if not assignment.keep:
    lines.append(
      f"fast buckets: {assignment.fast_buckets} ({config.fast_bucket_fraction:g}%) "
      f"with {assignment.fast_jobs} jobs below {config.fast_bucket_memory:.0f} MB"
    )
  lines += [
    f"nodes: {config.size_nodes} (used {result.schedule.used_nodes})",
    f"latency: {result.latency:.2f} seconds ({result.latency / c.SECONDS_PER_HOUR:.2f} hours)",
    f"sum of bucket time: {cost.sum_real:.2f} seconds",
    f"core time: {cost.core_hours:.2f} hours",
    f"power usage: {cost.power_usage_kwh:.2f} kWh at {config.watt_per_core:g} W per core",
    f"cost: {cost.currency_symbol}{cost.cost:.2f} at {config.cents_per_kwh:g} cents per kWh",
    f"max bucket memory: {cost.max_bucket_memory:.0f} MB "
    f"({cost.bucket_memory_percent:.0f}% of {config.size_memory:.0f} MB per node)",
    f"max job memory: {cost.max_job_memory:.0f} MB ({cost.job_memory_percent:.0f}% of max bucket memory)",
    f"max memory limit hits per bucket: {cost.max_memory_limit_hits}",
  ]
  return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
  parser = build_parser()
  args = parser.parse_args(argv)

  try:
    config = config_from_args(args)
    planner = ZORT(config, verbose=not args.quiet)
    result = planner.run_files(args.benchmarks, args.directory)
    if args.output:
      result.write_assignment(args.output)
  except ZortError as error:
    print(f"zort: error: {error}", file=sys.stderr)
    return 1

  for line in format_report(result):
    print(line)
  if args.show_buckets:
    print(result.buckets_frame().to_string())
  return 0


if __name__ == '__main__':  # pragma: no cover
  sys.exit(main())
