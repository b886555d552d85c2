"""Tests for the schema-ledger command line."""

import copy
import json

import pytest
from typer.testing import CliRunner

from schema_ledger.cli import app

ORIGIN = "http://api.example.com/schema.json"

runner = CliRunner()


@pytest.fixture
def env(tmp_path, petstore):
    """Ledger root, project directory and two versions of a data source file."""
    root = tmp_path / "ledger"
    project = tmp_path / "shop"
    project.mkdir()

    v1 = tmp_path / "v1.json"
    v1.write_text(json.dumps(petstore))
    changed = copy.deepcopy(petstore)
    changed["mods"].append({"name": "Store", "interfaces": []})
    v2 = tmp_path / "v2.json"
    v2.write_text(json.dumps(changed))
    return {"root": root, "project": project, "v1": v1, "v2": v2}


def _invoke(env, *args):
    return runner.invoke(app, ["--root", str(env["root"]), *args])


def _record(env, snapshot, *extra):
    return _invoke(
        env, "record", str(snapshot), "--origin", ORIGIN, "--project", str(env["project"]), *extra
    )


class TestRecord:
    def test_first_record(self, env):
        result = _record(env, env["v1"], "--json")
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["saved"] is True
        assert payload["record"]["filename"] == "record_0"
        assert payload["diff"] is None

    def test_unchanged_record_is_skipped(self, env):
        _record(env, env["v1"])
        payload = json.loads(_record(env, env["v1"], "--json").stdout)
        assert payload["saved"] is False
        assert payload["diff"] == {"modDiffs": [], "boDiffs": []}

    def test_changed_record(self, env):
        _record(env, env["v1"])
        result = _record(env, env["v2"])
        assert result.exit_code == 0
        assert "Store" in result.stdout
        assert "record_1" in result.stdout

    def test_non_portable_names_rejected(self, env, tmp_path, petstore):
        bad = copy.deepcopy(petstore)
        bad["baseClasses"][0]["name"] = "Pedido_ñ"
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(bad))

        result = _record(env, path)
        assert result.exit_code == 1
        assert "Pedido_ñ" in result.stdout
        assert _record(env, path, "--no-validate").exit_code == 0

    def test_unreadable_snapshot_file(self, env, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{")
        assert _record(env, path).exit_code == 1


class TestHistory:
    def test_projects_empty(self, env):
        result = _invoke(env, "projects")
        assert result.exit_code == 0
        assert "No projects" in result.stdout

    def test_projects_json(self, env):
        _record(env, env["v1"])
        payload = json.loads(_invoke(env, "projects", "--json").stdout)
        assert len(payload) == 1
        assert payload[0]["originUrl"] == ORIGIN
        assert payload[0]["projectPath"] == "project_0"
        assert payload[0]["projectName"] == str(env["project"].resolve())

    def test_latest(self, env, petstore):
        _record(env, env["v1"])
        result = _invoke(env, "latest", "--origin", ORIGIN, "--project", str(env["project"]))
        assert result.exit_code == 0
        assert json.loads(result.stdout) == petstore

    def test_latest_unknown_project(self, env):
        result = _invoke(env, "latest", "--origin", ORIGIN, "--project", str(env["project"]))
        assert result.exit_code == 1


class TestReport:
    def test_report_json(self, env):
        _record(env, env["v1"])
        _record(env, env["v2"])
        result = _invoke(
            env, "report", "--origin", ORIGIN, "--project", str(env["project"]), "--json"
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert len(payload["records"]) == 2
        assert payload["diffs"][0]["modDiffs"] == [
            {"kind": "module", "status": "added", "name": "Store", "details": ["Module Store added"]}
        ]

    def test_report_table(self, env):
        _record(env, env["v1"])
        result = _invoke(env, "report", "--origin", ORIGIN, "--project", str(env["project"]))
        assert result.exit_code == 0
        assert "record_0" in result.stdout
        assert "nothing to compare" in result.stdout

    def test_report_unknown_project(self, env):
        result = _invoke(env, "report", "--origin", ORIGIN, "--project", str(env["project"]))
        assert result.exit_code == 1
        assert "No history" in result.stdout


class TestDiff:
    def test_diff_json(self, env):
        result = _invoke(env, "diff", str(env["v1"]), str(env["v2"]), "--json")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["modDiffs"][0]["name"] == "Store"

    def test_diff_identical(self, env):
        result = _invoke(env, "diff", str(env["v1"]), str(env["v1"]))
        assert result.exit_code == 0
        assert "No schema changes" in result.stdout


class TestGlobalOptions:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.stdout
