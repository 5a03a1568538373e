"""Tests for ``versolve resolve``.

Verifies:
    - Successful resolution prints a table and exits 0.
    - JSON output and lock documents.
    - Exit code 1 when no acceptable version exists.
    - Exit code 2 for bad indexes, bad requirements and load failures.
"""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from versolve.cli.main import cli


class TestResolveSuccess:
    """Resolvable requirements."""

    def test_exit_code_zero(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(index_file), "app"])
        assert result.exit_code == 0

    def test_table_lists_versions(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(index_file), "app"])
        assert "Resolution successful" in result.output
        assert "1.5.0" in result.output
        assert "0.3.1" in result.output

    def test_progress_reported(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(index_file), "app"])
        assert "Considering app" in result.output

    def test_quiet_hides_progress(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", "-q", str(index_file), "app"])
        assert "Considering" not in result.output

    def test_json_output(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(index_file), "app", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["resolved"] == {"app": "2.0.0", "http": "1.5.0", "log": "0.3.1"}

    def test_requirement_narrows_choice(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(index_file), "app<2.0.0", "--json"])
        data = json.loads(result.output)
        assert data["resolved"] == {"app": "1.0.0", "http": "2.0.0"}

    def test_exclusion(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(
            cli, ["resolve", str(index_file), "app", "legacy none", "--json"]
        )
        data = json.loads(result.output)
        assert data["excluded"] == ["legacy"]
        assert "legacy" not in data["resolved"]

    def test_no_requirements(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(index_file)])
        assert result.exit_code == 0
        assert "No packages to resolve" in result.output

    def test_parallel_jobs(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(index_file), "app", "-j", "4", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["resolved"]["http"] == "1.5.0"

    def test_writes_lock(self, runner: CliRunner, index_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "out" / "versolve.lock"
        result = runner.invoke(cli, ["resolve", str(index_file), "app", "-o", str(out)])
        assert result.exit_code == 0
        assert "Lock written to" in result.output
        data = json.loads(out.read_text())
        assert data["lockfile_version"] == "1.0"
        assert data["requirements"] == ["app"]


class TestResolveFailures:
    """Failure exit codes."""

    def test_unsatisfiable_exits_1(
        self, runner: CliRunner, conflicting_index_file: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(conflicting_index_file), "app"])
        assert result.exit_code == 1
        assert "Resolution failed" in result.output

    def test_unsatisfiable_json_exits_1(
        self, runner: CliRunner, conflicting_index_file: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(conflicting_index_file), "app", "--json"])
        assert result.exit_code == 1
        assert "No version of 'app'" in result.output

    def test_conflicting_requirements_exit_1(
        self, runner: CliRunner, index_file: Path
    ) -> None:
        result = runner.invoke(
            cli, ["resolve", str(index_file), "app>=2.0.0", "app<1.0.0", "--json"]
        )
        assert result.exit_code == 1
        assert "input constraints conflict" in result.output

    def test_missing_package_exits_2(
        self, runner: CliRunner, broken_index_file: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(broken_index_file), "app"])
        assert result.exit_code == 2
        assert "ghost" in result.output

    def test_bad_requirement_exits_2(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(index_file), "app!=1.0.0"])
        assert result.exit_code == 2
        assert "Error" in result.output

    def test_malformed_index_exits_2(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("just a string\n")
        result = runner.invoke(cli, ["resolve", str(path), "app"])
        assert result.exit_code == 2

    def test_nonexistent_index(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["resolve", "/nonexistent/index.yaml", "app"])
        assert result.exit_code == 2
        assert "does not exist" in result.output or "Error" in result.output

    def test_zero_jobs_rejected(self, runner: CliRunner, index_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(index_file), "app", "-j", "0"])
        assert result.exit_code == 2
