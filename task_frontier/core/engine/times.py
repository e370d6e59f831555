from __future__ import annotations

from typing import Callable, Iterable, Iterator, Mapping, Optional, TypeVar, Union

from task_frontier.core.engine.reachability import GraphIndex, build_index, walk_ancestors
from task_frontier.core.model import UNKNOWN, DependencyEdge, Metric, TaskNode, TimeMetric, Unknown
from task_frontier.core.units.durations import to_days


# Two metrics per task, both in days:
# - serial_sum: every remaining task upstream (counted once) done one after another
# - critical_min: unlimited parallelism, so only the longest prerequisite chain counts
#
# A done/someday task contributes 0 and is a barrier: nothing behind it matters.
# An active task without an estimate poisons itself and everything downstream of it.

V = TypeVar("V")

DayValue = Union[float, Unknown]


def post_order(
    root: str,
    expand: Callable[[str], Iterable[str]],
    finish: Callable[[str, list[V]], V],
    cycle_value: V,
    memo: dict[str, V],
) -> V:
    """Evaluate `root` bottom-up over its prerequisites without recursion.

    `expand(n)` yields the ids whose values `finish(n, values)` needs. Results
    are memoized in `memo`, so every node is finished at most once per table.
    An id met again while it is still on the path gets `cycle_value`.
    """
    if root in memo:
        return memo[root]

    stack: list[tuple[str, Iterator[str], list[V]]] = [(root, iter(expand(root)), [])]
    on_path: set[str] = {root}
    while stack:
        node_id, pending, values = stack[-1]
        for child in pending:
            if child in memo:
                values.append(memo[child])
            elif child in on_path:
                values.append(cycle_value)
            else:
                on_path.add(child)
                stack.append((child, iter(expand(child)), []))
                break
        else:
            stack.pop()
            on_path.discard(node_id)
            result = finish(node_id, values)
            memo[node_id] = result
            if stack:
                stack[-1][2].append(result)

    return memo[root]


class TimeEvaluator:
    """Memo tables for one focal evaluation. Not reused across calls."""

    def __init__(self, index: GraphIndex, units: Mapping[str, float] | None = None) -> None:
        self.index = index
        self.units = units
        self._blocked: dict[str, bool] = {}
        self._critical: dict[str, DayValue] = {}
        self._days: dict[str, float] = {}

    def _estimate_days(self, node_id: str) -> float:
        days = self._days.get(node_id)
        if days is None:
            days = to_days(self.index.nodes_by_id[node_id].estimate, self.units)
            self._days[node_id] = days
        return days

    def duration(self, node_id: str) -> float:
        if self.index.is_resolved(node_id):
            return 0.0
        return self._estimate_days(node_id)

    def has_estimate(self, node_id: str) -> bool:
        return self._estimate_days(node_id) > 0

    def is_blocked(self, node_id: str) -> bool:
        def expand(n: str) -> list[str]:
            if self.index.is_resolved(n) or not self.has_estimate(n):
                return []
            return self.index.prerequisites_of(n)

        def finish(n: str, values: list[bool]) -> bool:
            if self.index.is_resolved(n):
                return False
            if not self.has_estimate(n):
                return True
            return any(values)

        return post_order(node_id, expand, finish, False, self._blocked)

    def critical_min(self, node_id: str) -> DayValue:
        def expand(n: str) -> list[str]:
            if self.index.is_resolved(n) or self.is_blocked(n):
                return []
            return self.index.prerequisites_of(n)

        def finish(n: str, values: list[DayValue]) -> DayValue:
            if self.index.is_resolved(n):
                return 0.0
            if self.is_blocked(n):
                return UNKNOWN
            upstream = [v for v in values if isinstance(v, float)]
            return self.duration(n) + max(upstream, default=0.0)

        return post_order(node_id, expand, finish, 0.0, self._critical)

    def serial_sum(self, node_id: str) -> DayValue:
        if self.is_blocked(node_id) or not self.has_estimate(node_id):
            return UNKNOWN
        total = self.duration(node_id)
        for a in walk_ancestors(self.index, node_id, stop_at_resolved=True):
            if not self.index.is_resolved(a) and self.has_estimate(a):
                total += self.duration(a)
        return total

    def metric(self, node_id: str) -> Metric:
        serial = self.serial_sum(node_id)
        critical = self.critical_min(node_id)
        if isinstance(serial, Unknown) or isinstance(critical, Unknown):
            return UNKNOWN
        return TimeMetric(serial_sum=serial, critical_min=critical)


def cumulative_times(
    focal_id: Optional[str],
    nodes: Iterable[TaskNode],
    edges: Iterable[DependencyEdge],
    units: Mapping[str, float] | None = None,
) -> dict[str, Metric]:
    """Return time metrics for `focal_id` and every task on its remaining path.

    The focal task always gets an entry while it is active (UNKNOWN when it
    needs an estimate somewhere upstream). Other tasks appear only with numeric
    metrics; resolved and blocked ones are left out.
    """
    if not focal_id:
        return {}
    return cumulative_times_in(build_index(nodes, edges), focal_id, units)


def cumulative_times_in(
    index: GraphIndex, focal_id: str, units: Mapping[str, float] | None = None
) -> dict[str, Metric]:
    focal = index.node(focal_id)
    if focal is None or focal.resolved:
        return {}

    ev = TimeEvaluator(index, units)
    out: dict[str, Metric] = {focal_id: ev.metric(focal_id)}

    for nid in sorted(walk_ancestors(index, focal_id, stop_at_resolved=True)):
        if index.is_resolved(nid) or ev.is_blocked(nid):
            continue
        m = ev.metric(nid)
        if isinstance(m, TimeMetric) and (m.serial_sum > 0 or m.critical_min > 0):
            out[nid] = m

    return out
