"""Integration tests for the nest CLI.

These tests verify the commands work end-to-end on the job fixtures,
including:
- run prints the usage table or JSON and exits 0
- infeasible jobs exit 2 and explain which piece is at fault
- invalid job files exit 1
- check and validate never run the search
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from nesting.cli.main import EXIT_INFEASIBLE, EXIT_INVALID, app

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "jobs"


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


class TestRunCommand:
    """Tests for the run command."""

    def test_sheet_job_text(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["run", str(FIXTURES_PATH / "sheet_job.json")])

        assert result.exit_code == 0
        assert "STOCK USAGE" in result.output
        assert "Full sheet" in result.output
        assert "Layout 1" in result.output

    def test_sheet_job_json(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["run", str(FIXTURES_PATH / "sheet_job.json"), "--format", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["is_valid"] is True
        assert data["summary"]["counts"] == {"S1": 1}
        assert data["summary"]["waste_area"] == 280_000
        assert data["summary"]["total_price"] == 42.5

    def test_straight_cuts_job(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["run", str(FIXTURES_PATH / "straight_cuts_job.json"), "-f", "json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["summary"]["counts"] == {"S2": 2}

    def test_length_job(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["run", str(FIXTURES_PATH / "length_job.json"), "-f", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"]["counts"] == {"BAR6": 1, "BAR3": 1}

    def test_no_layouts(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["run", str(FIXTURES_PATH / "sheet_job.json"), "--no-layouts"]
        )

        assert result.exit_code == 0
        assert "Layout 1" not in result.output

    def test_output_file(self, runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "result.json"

        result = runner.invoke(
            app,
            ["run", str(FIXTURES_PATH / "sheet_job.json"), "-f", "json", "-o", str(target)],
        )

        assert result.exit_code == 0
        assert json.loads(target.read_text())["is_valid"] is True

    def test_step_limit_reported(self, runner: CliRunner, tmp_path: Path) -> None:
        job = {
            "stock": [{"id": "S1", "width": 1000, "length": 1000}],
            "demand": [{"template_id": "P", "width": 600, "length": 600, "quantity": 4}],
        }
        path = tmp_path / "job.json"
        path.write_text(json.dumps(job))

        result = runner.invoke(app, ["run", str(path), "--max-steps", "1"])

        assert result.exit_code == 0
        assert "search budget exhausted" in result.output

    def test_infeasible_job(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["run", str(FIXTURES_PATH / "infeasible_job.json")])

        assert result.exit_code == EXIT_INFEASIBLE
        assert "Tabletop" in result.output
        assert "fits no stock unit" in result.output

    def test_infeasible_job_json(self, runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "result.json"

        result = runner.invoke(
            app,
            ["run", str(FIXTURES_PATH / "infeasible_job.json"), "-f", "json", "-o", str(target)],
        )

        assert result.exit_code == EXIT_INFEASIBLE
        data = json.loads(target.read_text())
        assert data["failure"] == "no_feasible_stock"
        assert data["explored"] == 0

    def test_invalid_json(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["run", str(FIXTURES_PATH / "invalid_json.json")])

        assert result.exit_code == EXIT_INVALID
        assert "Invalid JSON syntax" in result.output

    def test_unknown_format(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["run", str(FIXTURES_PATH / "sheet_job.json"), "-f", "xml"]
        )

        assert result.exit_code == EXIT_INVALID
        assert "Unknown format" in result.output


class TestCheckCommand:
    """Tests for the check command."""

    def test_feasible(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["check", str(FIXTURES_PATH / "sheet_job.json")])

        assert result.exit_code == 0
        assert "All pieces fit at least one stock unit." in result.output
        assert "usable 980×980" in result.output

    def test_infeasible(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["check", str(FIXTURES_PATH / "infeasible_job.json")])

        assert result.exit_code == EXIT_INFEASIBLE
        assert "Pieces that fit no stock unit:" in result.output
        assert "Tabletop (200x2000) x1" in result.output

    def test_missing_file(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["check", str(FIXTURES_PATH / "nonexistent.json")])

        assert result.exit_code == EXIT_INVALID
        assert "File not found" in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_job(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "length_job.json")])

        assert result.exit_code == 0
        assert "2 stock units, 2 demand templates (5 pieces), mode: length" in result.output
        assert "Validation passed." in result.output

    def test_unknown_field_rejected(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "unknown_field.json")])

        assert result.exit_code == 1
        assert "stock[0].thickness" in result.output
        assert "Validation failed." in result.output

    def test_unknown_stock_reference(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["validate", str(FIXTURES_PATH / "unknown_stock_ref.json")]
        )

        assert result.exit_code == 1
        assert "unknown stock: S9" in result.output

    def test_invalid_json(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "invalid_json.json")])

        assert result.exit_code == 1
        assert "Errors:" in result.output
        assert "Line" in result.output
