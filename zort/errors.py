"""Exception hierarchy shared by the readers, matcher and planning stages."""

from __future__ import annotations


class ZortError(Exception):
  """Base class for every error the planner reports to the user."""


class InputError(ZortError, ValueError):
  """An input file is missing or one of its lines is malformed."""


class MatchingError(ZortError, ValueError):
  """Benchmark and zummary entries do not pair up one to one."""


class ConfigurationError(ZortError, ValueError):
  """A planner setting is out of range."""


class EmptyPoolError(ZortError, ValueError):
  """Bucket assignment was requested without any jobs."""
