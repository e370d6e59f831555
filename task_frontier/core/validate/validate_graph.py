from __future__ import annotations

from collections import Counter
from typing import Any, Iterable, Optional, cast

from task_frontier.core.errors import GraphValidationError
from task_frontier.core.model import (
    DependencyEdge,
    Duration,
    DurationUnit,
    TaskGraph,
    TaskNode,
    TaskStatus,
)


ALLOWED_STATUSES: set[str] = {"todo", "in-progress", "done", "someday"}
ALLOWED_UNITS: set[str] = {"days", "weeks", "months"}


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def validate_graph(graph: dict[str, Any]) -> tuple[Optional[TaskGraph], list[GraphValidationError]]:
    """Validate a graph snapshot.

    Returns (graph, errors). Graph is None when errors exist.
    Edges pointing at unknown ids are not errors: the engine ignores them and
    the linter reports them.
    """

    file = cast(Optional[str], graph.get("__file__"))
    errors: list[GraphValidationError] = []

    schema_version = graph.get("schema_version")
    if not isinstance(schema_version, str) or not schema_version.strip():
        errors.append(
            GraphValidationError(
                code="E_REQUIRED_FIELD",
                message="schema_version is required and must be a non-empty string",
                file=file,
                path="schema_version",
            )
        )

    nodes = graph.get("nodes")
    if not isinstance(nodes, list):
        errors.append(
            GraphValidationError(
                code="E_REQUIRED_FIELD",
                message="nodes is required and must be an array",
                file=file,
                path="nodes",
            )
        )
        return None, _sorted(errors)

    nodes_by_id: dict[str, TaskNode] = {}
    for i, raw in enumerate(nodes):
        node, node_errors = _validate_node(raw, f"nodes[{i}]", file, nodes_by_id)
        errors.extend(node_errors)
        if node is not None:
            nodes_by_id[node.id] = node

    edges: list[DependencyEdge] = []
    raw_edges = graph.get("edges")
    if raw_edges is None:
        raw_edges = []
    if not isinstance(raw_edges, list):
        errors.append(
            GraphValidationError(
                code="E_INVALID_TYPE",
                message="edges must be an array",
                file=file,
                path="edges",
            )
        )
    else:
        for i, raw in enumerate(raw_edges):
            edge, edge_errors = _validate_edge(raw, f"edges[{i}]", file)
            errors.extend(edge_errors)
            if edge is not None:
                edges.append(edge)

    if errors:
        return None, _sorted(errors)

    return (
        TaskGraph(
            schema_version=cast(str, schema_version),
            nodes_by_id=nodes_by_id,
            edges=edges,
        ),
        [],
    )


def _validate_node(
    raw: Any,
    node_path: str,
    file: Optional[str],
    seen: dict[str, TaskNode],
) -> tuple[Optional[TaskNode], list[GraphValidationError]]:
    def err(code: str, message: str, path: str) -> GraphValidationError:
        return GraphValidationError(code=code, message=message, file=file, path=path)

    if not isinstance(raw, dict):
        return None, [err("E_INVALID_TYPE", "node must be an object", node_path)]

    nid = raw.get("id")
    if not isinstance(nid, str) or not nid.strip():
        return None, [
            err("E_REQUIRED_FIELD", "id is required and must be a non-empty string", f"{node_path}.id")
        ]
    if nid in seen:
        return None, [err("E_DUPLICATE_ID", f"duplicate node id: {nid}", f"{node_path}.id")]

    errors: list[GraphValidationError] = []

    status = raw.get("status", "todo")
    if not isinstance(status, str) or status not in ALLOWED_STATUSES:
        errors.append(
            err(
                "E_INVALID_ENUM",
                f"status must be one of {sorted(ALLOWED_STATUSES)}",
                f"{node_path}.status",
            )
        )

    title = raw.get("title")
    if title is not None and not isinstance(title, str):
        errors.append(err("E_INVALID_TYPE", "title must be a string", f"{node_path}.title"))

    estimate: Optional[Duration] = None
    raw_estimate = raw.get("estimate")
    if raw_estimate is not None:
        est_path = f"{node_path}.estimate"
        if not isinstance(raw_estimate, dict):
            errors.append(err("E_INVALID_TYPE", "estimate must be an object {value, unit}", est_path))
        else:
            value = raw_estimate.get("value")
            unit = raw_estimate.get("unit", "days")
            if not _is_number(value) or value <= 0:
                errors.append(
                    err("E_INVALID_ESTIMATE", "estimate.value must be a positive number", f"{est_path}.value")
                )
            elif not isinstance(unit, str) or unit not in ALLOWED_UNITS:
                errors.append(
                    err(
                        "E_INVALID_ENUM",
                        f"estimate.unit must be one of {sorted(ALLOWED_UNITS)}",
                        f"{est_path}.unit",
                    )
                )
            else:
                estimate = Duration(value=float(value), unit=cast(DurationUnit, unit))

    if errors:
        return None, errors

    return (
        TaskNode(
            id=nid,
            status=cast(TaskStatus, status),
            estimate=estimate,
            title=cast(Optional[str], title),
        ),
        [],
    )


def _validate_edge(
    raw: Any, edge_path: str, file: Optional[str]
) -> tuple[Optional[DependencyEdge], list[GraphValidationError]]:
    if not isinstance(raw, dict):
        return None, [
            GraphValidationError(
                code="E_INVALID_TYPE",
                message="edge must be an object {from, to}",
                file=file,
                path=edge_path,
            )
        ]

    errors: list[GraphValidationError] = []
    for key in ("from", "to"):
        v = raw.get(key)
        if not isinstance(v, str) or not v.strip():
            errors.append(
                GraphValidationError(
                    code="E_REQUIRED_FIELD",
                    message=f"{key} is required and must be a non-empty string",
                    file=file,
                    path=f"{edge_path}.{key}",
                )
            )
    if errors:
        return None, errors
    return DependencyEdge(prerequisite_id=raw["from"], dependent_id=raw["to"]), []


def summarize_graph(graph: TaskGraph) -> str:
    counts = Counter([n.status for n in graph.nodes_by_id.values()])
    ordered_statuses: list[str] = ["todo", "in-progress", "done", "someday"]
    parts = [f"{s}={counts.get(s, 0)}" for s in ordered_statuses]
    return (
        f"OK: {len(graph.nodes_by_id)} tasks ("
        + ", ".join(parts)
        + f")\nEdges: {len(graph.edges)}"
    )


def _sorted(errors: Iterable[GraphValidationError]) -> list[GraphValidationError]:
    return sorted(
        list(errors),
        key=lambda e: (
            e.file or "",
            e.path or "",
            e.code,
        ),
    )
