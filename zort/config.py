"""Settings bundle threaded through the planning stages."""

from __future__ import annotations

from dataclasses import dataclass

import zort.constants as c
from zort.errors import ConfigurationError


def _whole_number(what: str, value) -> int:
  number = float(value)
  if not number.is_integer():
    raise ConfigurationError(f"{what} must be a whole number (got {value!r})")
  return int(number)


@dataclass(frozen=True)
class PlannerConfig:
  """
  Planner settings.

  Parameters
  ----------
  bucket_size:
      Jobs (cores) per bucket.
  fast_bucket_fraction:
      Percentage of buckets reserved for fast solved jobs.
  fast_bucket_memory:
      Memory ceiling in MB for jobs in fast buckets.
  size_nodes:
      Number of nodes the buckets are simulated on.
  size_memory:
      Memory per node in MB.
  watt_per_core:
      Power drawn per busy core.
  cents_per_kwh:
      Electricity price.
  keep:
      Pack jobs in their original order instead of generating a new packing.
  currency:
      ``'euro'`` or ``'dollar'``.
  """

  bucket_size: int = c.DEFAULT_BUCKET_SIZE
  fast_bucket_fraction: float = c.DEFAULT_FAST_BUCKET_FRACTION
  fast_bucket_memory: float = c.DEFAULT_FAST_BUCKET_MEMORY
  size_nodes: int = c.DEFAULT_SIZE_NODES
  size_memory: float = c.DEFAULT_SIZE_MEMORY
  watt_per_core: float = c.DEFAULT_WATT_PER_CORE
  cents_per_kwh: float = c.DEFAULT_CENTS_PER_KWH
  keep: bool = False
  currency: str = c.DEFAULT_CURRENCY

  def __post_init__(self) -> None:
    try:
      object.__setattr__(self, "bucket_size", _whole_number("bucket size", self.bucket_size))
      object.__setattr__(self, "fast_bucket_fraction", float(self.fast_bucket_fraction))
      object.__setattr__(self, "fast_bucket_memory", float(self.fast_bucket_memory))
      object.__setattr__(self, "size_nodes", _whole_number("number of nodes", self.size_nodes))
      object.__setattr__(self, "size_memory", float(self.size_memory))
      object.__setattr__(self, "watt_per_core", float(self.watt_per_core))
      object.__setattr__(self, "cents_per_kwh", float(self.cents_per_kwh))
    except ConfigurationError:
      raise
    except (TypeError, ValueError) as error:
      raise ConfigurationError(f"invalid planner setting: {error}") from error
    object.__setattr__(self, "keep", bool(self.keep))
    object.__setattr__(self, "currency", str(self.currency).lower())

    if self.bucket_size < 1:
      raise ConfigurationError(f"bucket size must be at least 1 (got {self.bucket_size})")
    if not 0 <= self.fast_bucket_fraction <= 100:
      raise ConfigurationError(
        f"fast bucket fraction must be between 0 and 100 percent (got {self.fast_bucket_fraction:g})"
      )
    if self.fast_bucket_memory < 0:
      raise ConfigurationError("fast bucket memory must be non-negative")
    if self.size_nodes < 1:
      raise ConfigurationError(f"number of nodes must be at least 1 (got {self.size_nodes})")
    if self.size_memory <= 0:
      raise ConfigurationError("node memory must be positive")
    if self.watt_per_core < 0:
      raise ConfigurationError("watt per core must be non-negative")
    if self.cents_per_kwh < 0:
      raise ConfigurationError("cents per kWh must be non-negative")
    if self.currency not in c.currency_symbols:
      raise ConfigurationError(
        f"currency must be one of {sorted(c.currency_symbols)} (got '{self.currency}')"
      )