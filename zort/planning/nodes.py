"""
Makespan estimate for running buckets on a pool of identical nodes.

Each bucket occupies one node exclusively for its wall time.  Buckets are
placed longest first on whichever node becomes free soonest (greedy list
scheduling in LPT order), and the latency is the time the last bucket ends.
This only bounds the turnaround of a submission; it does not model how the
batch system actually places jobs on cores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import heapq
from typing import Dict, List, Sequence, Tuple

from zort.planning.buckets import Bucket


@dataclass
class Node:
  """Simulated node and the buckets it ran, in simulation order."""

  index: int
  available_at: float = 0.0
  buckets: List[int] = field(default_factory=list)

  @property
  def used(self) -> bool:
    return bool(self.buckets)


@dataclass(frozen=True)
class Placement:
  """Where and when a single bucket runs in the simulation."""

  bucket: int
  node: int
  start: float
  end: float


@dataclass
class Schedule:
  """Outcome of :meth:`NodeScheduler.simulate`."""

  nodes: List[Node]
  placements: List[Placement]

  @property
  def latency(self) -> float:
    return max((placement.end for placement in self.placements), default=0.0)

  @property
  def used_nodes(self) -> int:
    return sum(1 for node in self.nodes if node.used)

  def placement_of(self, bucket: int) -> Placement:
    for placement in self.placements:
      if placement.bucket == bucket:
        return placement
    raise KeyError(bucket)

  def by_bucket(self) -> Dict[int, Placement]:
    return {placement.bucket: placement for placement in self.placements}


class NodeScheduler:
  """
  Simulate ``size_nodes`` identical nodes.

  Parameters
  ----------
  size_nodes:
      Number of nodes available to the submission.
  """

  def __init__(self, size_nodes: int) -> None:
    if size_nodes < 1:
      raise ValueError("size_nodes must be at least 1")
    self._size_nodes = int(size_nodes)

  @property
  def size_nodes(self) -> int:
    return self._size_nodes

  def simulate(self, buckets: Sequence[Bucket]) -> Schedule:
    """
    Assign every bucket to the node that is available earliest.

    Buckets are taken by decreasing wall time, ties in bucket order.  Among
    nodes free at the same time the lowest node index wins, so idle nodes
    are used in index order.
    """
    nodes = [Node(index=index) for index in range(self._size_nodes)]
    heap: List[Tuple[float, int]] = [(0.0, index) for index in range(self._size_nodes)]

    order = sorted(range(len(buckets)), key=lambda position: -buckets[position].real)

    placements: List[Placement] = []
    for position in order:
      bucket = buckets[position]
      available_at, node_index = heapq.heappop(heap)
      start = available_at
      end = start + bucket.real
      node = nodes[node_index]
      node.available_at = end
      node.buckets.append(bucket.index)
      placements.append(Placement(bucket=bucket.index, node=node_index, start=start, end=end))
      heapq.heappush(heap, (end, node_index))

    return Schedule(nodes=nodes, placements=placements)
