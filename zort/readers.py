"""Readers for the benchmark list and the ``zummary`` file of a prior run."""
from __future__ import annotations

import gzip
from pathlib import Path
from typing import List, Optional

from tqdm.auto import tqdm

import zort.constants as c
from zort.errors import InputError
from zort.records import BenchmarkRecord, RunLimits, RunRecord

_ZUMMARY_FIELDS = 8


def _open_text(path: Path):
  # any byte but NUL may appear in a name
  if path.suffix == ".gz":
    return gzip.open(path, "rt", encoding="utf-8", errors="surrogateescape")
  return open(path, "r", encoding="utf-8", errors="surrogateescape")


def zummary_path(directory: str | Path) -> Path:
  return Path(directory) / c.ZUMMARY_NAME


def ensure_file(path: str | Path, what: str) -> Path:
  file = Path(path)
  if not file.is_file():
    raise InputError(f"{what} file '{file}' does not exist")
  return file


def ensure_directory(path: str | Path) -> Path:
  directory = Path(path)
  if not directory.is_dir():
    raise InputError(f"directory '{directory}' does not exist")
  return directory


def _parse_benchmark(line: str, lineno: int, file: Path) -> BenchmarkRecord:
  parts = line.split(maxsplit=2)
  if len(parts) < 2:
    raise InputError(f"line {lineno} truncated in '{file}'")
  order_token = parts[0]
  if not (order_token.isascii() and order_token.isdigit()):
    raise InputError(f"expected digit in line {lineno} in '{file}'")
  # with three fields the name is the rest of the line and may contain spaces
  path: Optional[str] = parts[1] if len(parts) == 3 else None
  return BenchmarkRecord(order=int(order_token), name=parts[-1].rstrip(), path=path)


def _check_line(raw: str, lineno: int, file: Path) -> str:
  if not raw.endswith("\n"):
    raise InputError(f"unexpected end-of-file before new-line in line {lineno} in '{file}'")
  line = raw[:-1]
  if "\0" in line:
    raise InputError(f"unexpected zero character in line {lineno} in '{file}'")
  if not line.strip():
    raise InputError(f"empty line {lineno} in '{file}'")
  return line


def _parse_zummary(line: str, lineno: int, file: Path) -> RunRecord:
  parts = line.split()
  if len(parts) != _ZUMMARY_FIELDS:
    raise InputError(f"invalid zummary line {lineno} in '{file}'")
  name = parts[0]
  try:
    status = int(parts[1])
    time, real, memory, limit_time, limit_real, limit_memory = (float(value) for value in parts[2:])
  except ValueError:
    raise InputError(f"invalid zummary line {lineno} in '{file}'") from None
  return RunRecord(
    name=name,
    status=status,
    time=time,
    real=real,
    memory=memory,
    limit=RunLimits(time=limit_time, real=limit_real, memory=limit_memory),
  )


def read_benchmarks(path: str | Path, progress: bool = False) -> List[BenchmarkRecord]:
  """
  Parse a benchmark list with one ``order [path] name`` entry per line.

  Empty lines are rejected rather than skipped so that truncated or
  concatenated files are noticed before planning.
  """
  file = ensure_file(path, "benchmarks")
  benchmarks: List[BenchmarkRecord] = []
  with _open_text(file) as fh:
    for lineno, raw in enumerate(tqdm(fh, desc='Reading benchmarks', unit='line', leave=False, disable=not progress), start=1):
      line = _check_line(raw, lineno, file)
      benchmarks.append(_parse_benchmark(line, lineno, file))
  return benchmarks


def read_zummary(path: str | Path, progress: bool = False) -> List[RunRecord]:
  """
  Parse a ``zummary`` file.

  The first line is a column header and is skipped.  Every following line
  holds ``name status time real memory limit_time limit_real limit_memory``.
  """
  file = ensure_file(path, "zummary")
  runs: List[RunRecord] = []
  with _open_text(file) as fh:
    header = fh.readline()
    if not header:
      raise InputError(f"failed to read header line in '{file}'")
    for lineno, raw in enumerate(tqdm(fh, desc='Reading zummary', unit='line', leave=False, disable=not progress), start=2):
      line = _check_line(raw, lineno, file)
      runs.append(_parse_zummary(line, lineno, file))
  return runs
