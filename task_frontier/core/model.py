from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union


TaskStatus = Literal["todo", "in-progress", "done", "someday"]
DurationUnit = Literal["days", "weeks", "months"]

# "someday" is the deferred status: resolved for traversal, distinct for display.
RESOLVED_STATUSES: frozenset[str] = frozenset({"done", "someday"})


@dataclass(frozen=True)
class Duration:
    value: float
    unit: DurationUnit = "days"


@dataclass(frozen=True)
class TaskNode:
    id: str
    status: TaskStatus = "todo"
    estimate: Optional[Duration] = None

    title: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.status in RESOLVED_STATUSES


@dataclass(frozen=True)
class DependencyEdge:
    prerequisite_id: str
    dependent_id: str


@dataclass(frozen=True)
class TaskGraph:
    schema_version: str
    nodes_by_id: dict[str, TaskNode]
    edges: list[DependencyEdge]


@dataclass(frozen=True)
class TimeMetric:
    serial_sum: float  # days
    critical_min: float  # days


class Unknown(Enum):
    NEEDS_ESTIMATE = "needs_estimate"

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = Unknown.NEEDS_ESTIMATE

Metric = Union[TimeMetric, Unknown]


@dataclass(frozen=True)
class FocusResult:
    focal_id: Optional[str]
    frontier_ids: frozenset[str]
    times: dict[str, Metric]
