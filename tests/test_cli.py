"""
Tests for the BOATMRP command-line interface.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

from boatmrp import __version__
from boatmrp.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestCalculateCommand:
    """Tests for the calculate command."""

    def test_calculate(self, runner, dataset_file):
        result = runner.invoke(cli, ["calculate", str(dataset_file)])

        assert result.exit_code == 0, result.output
        assert "Part Requirements" in result.output
        assert "Acme Marine" in result.output
        assert "No supplier found for part NS-300" in result.output

    def test_calculate_writes_json(self, runner, dataset_file, tmp_path):
        output = tmp_path / "analysis.json"

        result = runner.invoke(
            cli, ["calculate", str(dataset_file), "-s", "0", "--no-batch-optimization", "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["safety_stock_percentage"] == 0
        cleat = data["suppliers"][0]["parts"][1]
        assert [line["quantity"] for line in cleat["order_lines"]] == [4, 4]

    def test_no_demand_in_range(self, runner, dataset_file):
        result = runner.invoke(cli, ["calculate", str(dataset_file), "--start", "2030-01-01"])

        assert result.exit_code == 1
        assert "No scheduled production units found" in result.output

    def test_safety_stock_out_of_range(self, runner, dataset_file):
        result = runner.invoke(cli, ["calculate", str(dataset_file), "-s", "150"])

        assert result.exit_code == 2


class TestScheduleCommand:
    """Tests for the schedule command."""

    def test_single_schedule_check(self, runner, dataset_file):
        result = runner.invoke(cli, ["schedule", str(dataset_file), "S1", "--check"])

        assert result.exit_code == 0, result.output
        assert "No projected shortages" in result.output
        assert "Schedule can be committed" in result.output

    def test_unknown_supplier(self, runner, dataset_file):
        result = runner.invoke(cli, ["schedule", str(dataset_file), "S9"])

        assert result.exit_code == 1
        assert "S9" in result.output

    def test_config_file_sets_batch_count(self, runner, dataset_file, tmp_path):
        config = tmp_path / "planner.yaml"
        config.write_text(yaml.safe_dump({"scheduling": {"default_batch_count": 2}}), encoding="utf-8")
        output = tmp_path / "schedule.json"

        result = runner.invoke(
            cli,
            ["-c", str(config), "schedule", str(dataset_file), "S1", "--strategy", "weekly",
             "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["schedule"]["strategy"] == "weekly"
        assert [b["order_date"] for b in data["schedule"]["batches"]] == ["2025-02-20", "2025-02-27"]

    def test_output_includes_allocation_differences(self, runner, dataset_file, tmp_path):
        output = tmp_path / "schedule.json"

        result = runner.invoke(cli, ["schedule", str(dataset_file), "S1", "-o", str(output)])

        assert result.exit_code == 0, result.output
        allocation = json.loads(output.read_text(encoding="utf-8"))["schedule"]["allocation"]
        assert allocation["total_difference"] == 0
        assert [(p["part_id"], p["difference"]) for p in allocation["parts"]] == [
            ("P-HULL", 0),
            ("P-CLEAT", 0),
        ]


class TestOtherCommands:
    """Tests for monthly, info and version output."""

    def test_monthly(self, runner, dataset_file):
        result = runner.invoke(cli, ["monthly", str(dataset_file)])

        assert result.exit_code == 0, result.output
        assert "Monthly Draft Purchase Orders" in result.output
        assert "2025-02" in result.output

    def test_info(self, runner):
        result = runner.invoke(cli, ["info"])

        assert result.exit_code == 0
        assert "BOATMRP" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert __version__ in result.output
