from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from task_frontier.core.model import DependencyEdge, TaskNode


@dataclass(frozen=True)
class GraphIndex:
    """Lookup tables for one evaluation.

    Edges with an endpoint missing from the node set are dropped here, so every
    id reachable through `prerequisites` is a known node.
    """

    nodes_by_id: dict[str, TaskNode]
    prerequisites: dict[str, list[str]]  # dependent_id -> [prerequisite_id, ...]

    def node(self, node_id: Optional[str]) -> Optional[TaskNode]:
        if node_id is None:
            return None
        return self.nodes_by_id.get(node_id)

    def prerequisites_of(self, node_id: str) -> list[str]:
        return self.prerequisites.get(node_id, [])

    def is_resolved(self, node_id: str) -> bool:
        n = self.nodes_by_id.get(node_id)
        return n is not None and n.resolved


def build_index(nodes: Iterable[TaskNode], edges: Iterable[DependencyEdge]) -> GraphIndex:
    nodes_by_id: dict[str, TaskNode] = {}
    for n in nodes:
        # First occurrence wins, matching how the linter reports duplicates.
        nodes_by_id.setdefault(n.id, n)

    prerequisites: dict[str, list[str]] = {}
    seen: set[tuple[str, str]] = set()
    for e in edges:
        if e.prerequisite_id not in nodes_by_id or e.dependent_id not in nodes_by_id:
            continue
        key = (e.prerequisite_id, e.dependent_id)
        if key in seen:
            continue
        seen.add(key)
        prerequisites.setdefault(e.dependent_id, []).append(e.prerequisite_id)

    return GraphIndex(nodes_by_id=nodes_by_id, prerequisites=prerequisites)


def walk_ancestors(index: GraphIndex, focal_id: str, *, stop_at_resolved: bool) -> set[str]:
    """Collect the ancestor cone of `focal_id` with an explicit worklist.

    Each id is expanded at most once. With `stop_at_resolved`, done/someday
    nodes are included but their own prerequisites are not explored.
    """
    if focal_id not in index.nodes_by_id:
        return set()

    visited: set[str] = {focal_id}
    stack: list[str] = [focal_id]
    while stack:
        cur = stack.pop()
        if cur != focal_id and stop_at_resolved and index.is_resolved(cur):
            continue
        for prereq in index.prerequisites_of(cur):
            if prereq not in visited:
                visited.add(prereq)
                stack.append(prereq)

    visited.discard(focal_id)
    return visited


def ancestors_of(
    focal_id: Optional[str],
    edges: Iterable[DependencyEdge],
    nodes: Iterable[TaskNode],
    stop_at_resolved: bool = False,
) -> set[str]:
    """Return every task that transitively precedes `focal_id` (excluding it).

    Never raises: cycles are bounded by the visited set, and edges that
    reference unknown ids contribute nothing.
    """
    if not focal_id:
        return set()
    return walk_ancestors(build_index(nodes, edges), focal_id, stop_at_resolved=stop_at_resolved)
