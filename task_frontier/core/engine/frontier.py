from __future__ import annotations

from typing import Iterable, Optional

from task_frontier.core.engine.reachability import GraphIndex, build_index, walk_ancestors
from task_frontier.core.model import DependencyEdge, TaskNode


# Frontier tasks are the next actionable work for a focal task:
#
#     A (done) ──┐
#                ├──> C (todo) ──> E (focal)
#     B (todo) ──┘
#
# ancestors(E) = {A, B, C}; A is resolved, C still waits on B, so frontier = {B}.


def frontier_of(
    focal_id: Optional[str],
    edges: Iterable[DependencyEdge],
    nodes: Iterable[TaskNode],
) -> set[str]:
    """Return the unresolved ancestors of `focal_id` whose prerequisites are all resolved."""
    if not focal_id:
        return set()
    return frontier_in(build_index(nodes, edges), focal_id)


def frontier_in(index: GraphIndex, focal_id: str) -> set[str]:
    # The unbounded walk is required here: a resolved ancestor must not hide
    # the unresolved work behind it.
    ancestors = walk_ancestors(index, focal_id, stop_at_resolved=False)

    out: set[str] = set()
    for nid in ancestors:
        node = index.nodes_by_id[nid]
        if node.resolved:
            continue
        if all(index.is_resolved(p) for p in index.prerequisites_of(nid)):
            out.add(nid)
    return out
