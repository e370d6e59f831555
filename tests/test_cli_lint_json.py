import json

from typer.testing import CliRunner

from task_frontier.cli import app

runner = CliRunner()


def test_cli_lint_text_success():
    r = runner.invoke(app, ["lint", "examples/basic-graph.yaml"])
    assert r.exit_code == 0
    assert "OK: lint passed" in r.stdout


def test_cli_lint_json_success():
    r = runner.invoke(app, ["lint", "examples/basic-graph.yaml", "--format", "json"])
    assert r.exit_code == 0
    payload = json.loads(r.stdout)
    assert payload["command"] == "lint"
    assert payload["ok"] is True
    assert payload["error_count"] == 0
    assert payload["errors"] == []


def test_cli_lint_json_failure_contains_codes():
    r = runner.invoke(app, ["lint", "examples/cyclic-graph.yaml", "--format", "json"])
    assert r.exit_code == 2
    payload = json.loads(r.stdout)
    assert payload["ok"] is False
    codes = {e["code"] for e in payload["errors"]}
    assert {"L_CYCLE_DETECTED", "L_SELF_DEPENDENCY", "L_DANGLING_EDGE"} <= codes
    assert {e["source"] for e in payload["errors"]} == {"lint"}
