"""Frontier detection and cumulative time propagation.

Everything here is a pure function of (focal task, nodes, edges): nothing is
cached between calls and inputs are never mutated. Cycles, dangling edges and
missing estimates are data conditions, not errors.
"""
from task_frontier.core.engine.evaluate import evaluate
from task_frontier.core.engine.frontier import frontier_of
from task_frontier.core.engine.reachability import ancestors_of
from task_frontier.core.engine.times import cumulative_times

__all__ = ["ancestors_of", "cumulative_times", "evaluate", "frontier_of"]
