"""Core time, energy and price derived from a bucket assignment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

import zort.constants as c
from zort.planning.buckets import Assignment

if TYPE_CHECKING:
  from zort.config import PlannerConfig


def _percent(part: float, whole: float) -> float:
  if whole <= 0:
    return 0.0
  return 100.0 * part / whole


@dataclass(frozen=True)
class CostReport:
  """Figures reported for one assignment."""

  sum_real: float
  core_seconds: float
  core_hours: float
  power_usage_kwh: float
  cost: float
  currency: str
  max_bucket_memory: float
  bucket_memory_percent: float
  max_job_memory: float
  job_memory_percent: float
  max_memory_limit_hits: int

  @property
  def currency_symbol(self) -> str:
    return c.currency_symbols[self.currency]


class CostModel:
  """
  Price an assignment.

  Every bucket is charged for its full configured width of
  ``bucket_size`` cores for its wall time, including a partly filled last
  bucket.

  Parameters
  ----------
  watt_per_core:
      Power drawn by one busy core.
  cents_per_kwh:
      Electricity price in cents of ``currency``.
  size_memory:
      Memory of one node in MB, the reference for the bucket memory share.
  currency:
      Key into :data:`zort.constants.currency_symbols`.
  """

  def __init__(
    self,
    *,
    watt_per_core: float = c.DEFAULT_WATT_PER_CORE,
    cents_per_kwh: float = c.DEFAULT_CENTS_PER_KWH,
    size_memory: float = c.DEFAULT_SIZE_MEMORY,
    currency: str = c.DEFAULT_CURRENCY,
  ) -> None:
    if watt_per_core < 0:
      raise ValueError("watt_per_core must be non-negative")
    if cents_per_kwh < 0:
      raise ValueError("cents_per_kwh must be non-negative")
    if size_memory <= 0:
      raise ValueError("size_memory must be positive")
    if currency not in c.currency_symbols:
      raise ValueError(f"unknown currency '{currency}'")

    self._watt_per_core = float(watt_per_core)
    self._cents_per_kwh = float(cents_per_kwh)
    self._size_memory = float(size_memory)
    self._currency = currency

  @classmethod
  def from_config(cls, config: "PlannerConfig") -> "CostModel":
    return cls(
      watt_per_core=config.watt_per_core,
      cents_per_kwh=config.cents_per_kwh,
      size_memory=config.size_memory,
      currency=config.currency,
    )

  def evaluate(self, assignment: Assignment) -> CostReport:
    reals = np.fromiter((bucket.real for bucket in assignment.buckets), dtype=np.float64, count=assignment.tasks)
    memories = np.fromiter((bucket.memory for bucket in assignment.buckets), dtype=np.float64, count=assignment.tasks)

    sum_real = float(reals.sum())
    core_seconds = assignment.bucket_size * sum_real
    core_hours = core_seconds / c.SECONDS_PER_HOUR
    power_usage_kwh = core_hours * self._watt_per_core / 1000.0
    cost = self._cents_per_kwh * power_usage_kwh / 100.0

    max_bucket_memory = float(memories.max()) if memories.size else 0.0
    max_job_memory = assignment.max_job_memory

    return CostReport(
      sum_real=sum_real,
      core_seconds=core_seconds,
      core_hours=core_hours,
      power_usage_kwh=power_usage_kwh,
      cost=cost,
      currency=self._currency,
      max_bucket_memory=max_bucket_memory,
      bucket_memory_percent=_percent(max_bucket_memory, self._size_memory),
      max_job_memory=max_job_memory,
      job_memory_percent=_percent(max_job_memory, max_bucket_memory),
      max_memory_limit_hits=assignment.max_memory_limit_hits,
    )
