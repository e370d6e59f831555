from task_frontier.core.engine import frontier_of
from task_frontier.core.model import DependencyEdge, TaskNode


def _e(src: str, dst: str) -> DependencyEdge:
    return DependencyEdge(prerequisite_id=src, dependent_id=dst)


def test_frontier_without_focus_is_empty():
    nodes = [TaskNode("a"), TaskNode("b")]
    assert frontier_of(None, [_e("a", "b")], nodes) == set()
    assert frontier_of("", [_e("a", "b")], nodes) == set()


def test_frontier_done_and_todo_prerequisites():
    #     A (done) ──┐
    #                ├──> C (todo) ──> E (focal)
    #     B (todo) ──┘
    nodes = [
        TaskNode("A", status="done"),
        TaskNode("B"),
        TaskNode("C"),
        TaskNode("E"),
    ]
    edges = [_e("A", "C"), _e("B", "C"), _e("C", "E")]
    assert frontier_of("E", edges, nodes) == {"B"}


def test_frontier_sees_unresolved_work_behind_resolved_task():
    nodes = [TaskNode("x"), TaskNode("d", status="done"), TaskNode("f")]
    edges = [_e("x", "d"), _e("d", "f")]
    assert frontier_of("f", edges, nodes) == {"x"}


def test_frontier_someday_prerequisite_does_not_block():
    nodes = [TaskNode("later", status="someday"), TaskNode("work", status="in-progress"), TaskNode("f")]
    edges = [_e("later", "work"), _e("work", "f")]
    assert frontier_of("f", edges, nodes) == {"work"}


def test_frontier_roots_are_always_members():
    nodes = [TaskNode("r1"), TaskNode("r2", status="in-progress"), TaskNode("mid"), TaskNode("f")]
    edges = [_e("r1", "mid"), _e("r2", "mid"), _e("mid", "f")]
    got = frontier_of("f", edges, nodes)
    assert {"r1", "r2"} <= got
    assert "mid" not in got


def test_frontier_excludes_focal_and_cycle_members():
    nodes = [TaskNode("a"), TaskNode("b"), TaskNode("f")]
    edges = [_e("a", "b"), _e("b", "a"), _e("b", "f"), _e("f", "f")]
    assert frontier_of("f", edges, nodes) == set()


def test_frontier_ignores_dangling_prerequisites():
    nodes = [TaskNode("a"), TaskNode("f")]
    edges = [_e("ghost", "a"), _e("a", "f")]
    assert frontier_of("f", edges, nodes) == {"a"}
