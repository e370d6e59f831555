from __future__ import annotations

from typing import Mapping, Optional

from task_frontier.core.engine.frontier import frontier_in
from task_frontier.core.engine.reachability import build_index
from task_frontier.core.engine.times import cumulative_times_in
from task_frontier.core.model import FocusResult, TaskGraph


def evaluate(
    focal_id: Optional[str],
    graph: TaskGraph,
    units: Mapping[str, float] | None = None,
) -> FocusResult:
    """Run frontier detection and time propagation for one focal task.

    The index is built once and shared; memo tables live only for this call.
    """
    if not focal_id:
        return FocusResult(focal_id=None, frontier_ids=frozenset(), times={})

    index = build_index(graph.nodes_by_id.values(), graph.edges)
    return FocusResult(
        focal_id=focal_id,
        frontier_ids=frozenset(frontier_in(index, focal_id)),
        times=cumulative_times_in(index, focal_id, units),
    )
