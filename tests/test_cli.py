from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from ptoledger.cli import app
from ptoledger.state import PlannerState

runner = CliRunner()


@pytest.fixture
def state_file(tmp_path) -> str:
    path = tmp_path / "state.json"
    result = runner.invoke(
        app,
        [
            "init",
            "--state",
            str(path),
            "--balance",
            "10",
            "--as-of",
            "2024-01-01",
            "--rate",
            "1",
            "--year",
            "2024",
        ],
    )
    assert result.exit_code == 0, result.output
    return str(path)


class TestInitCommand:
    def test_writes_migrated_state(self, state_file) -> None:
        with open(state_file) as f:
            data = json.load(f)
        assert data["config"]["initialBalance"] == 10
        assert data["config"]["visibleYears"] == [2024]
        assert data["config"]["payPeriodTemplate"]["frequency"] == "monthly"
        assert data["config"]["payPeriodTemplate"]["dayOfMonth"] == 1
        assert data["selectedDays"] == []

    def test_refuses_to_overwrite(self, state_file) -> None:
        result = runner.invoke(app, ["init", "--state", state_file])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_force_and_carryover(self, state_file) -> None:
        result = runner.invoke(
            app,
            [
                "init",
                "--state",
                state_file,
                "--as-of",
                "2024-01-01",
                "--year",
                "2024",
                "--year",
                "2025",
                "--frequency",
                "weekly",
                "--max-carryover",
                "5",
                "--force",
            ],
        )
        assert result.exit_code == 0
        with open(state_file) as f:
            state = PlannerState.from_json(f.read())
        assert state.config.visible_years == (2024, 2025)
        assert state.config.carryover.enabled
        assert state.config.carryover.max_days == 5
        assert state.config.pay_period_template.weekday == 4

    def test_negative_carryover_cap_is_rejected(self, tmp_path) -> None:
        path = tmp_path / "state.json"
        result = runner.invoke(app, ["init", "--state", str(path), "--max-carryover=-1"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert not path.exists()


class TestImportCommand:
    def test_converts_sunday_based_state(self, tmp_path) -> None:
        source = tmp_path / "exported.json"
        source.write_text(
            json.dumps(
                {
                    "config": {
                        "asOfDate": "2024-01-01",
                        "visibleYears": [2024],
                        "accrualFrequency": "weekly",
                        "payPeriodTemplate": {"frequency": "weekly", "weekday": 5},
                    },
                    "weekendDays": [0, 6],
                }
            )
        )
        target = tmp_path / "state.json"
        result = runner.invoke(app, ["import", str(source), "--state", str(target)])
        assert result.exit_code == 0, result.output
        assert "weekend days: [5, 6]" in result.output
        state = PlannerState.from_json(target.read_text())
        assert state.weekend_days == (5, 6)
        assert state.config.pay_period_template.weekday == 4

    def test_refuses_to_overwrite(self, state_file) -> None:
        result = runner.invoke(app, ["import", state_file, "--state", state_file])
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestLedgerCommand:
    def test_text_output(self, state_file) -> None:
        result = runner.invoke(app, ["ledger", "--state", state_file, "--on", "2024-06-01"])
        assert result.exit_code == 0
        assert "PTO LEDGER" in result.output
        assert "Balance on 2024-06-01: 15.00 days" in result.output

    def test_json_output(self, state_file) -> None:
        result = runner.invoke(
            app, ["ledger", "--state", state_file, "--json", "--on", "2024-06-01"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["days"] == 366
        assert data["yearEndBalances"] == {"2024": 21.0}
        assert data["balanceOn"] == {"date": "2024-06-01", "balance": 15.0}
        assert len(data["monthEndBalances"]) == 12
        assert data["transactions"][0]["type"] == "adjustment"

    def test_missing_state_file(self, tmp_path) -> None:
        result = runner.invoke(app, ["ledger", "--state", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "State file not found" in result.output

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        result = runner.invoke(app, ["ledger", "--state", str(path)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_invalid_state(self, tmp_path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"config": {"visibleYears": []}}))
        result = runner.invoke(app, ["ledger", "--state", str(path)])
        assert result.exit_code == 1
        assert "Invalid state file" in result.output

    def test_bad_date(self, state_file) -> None:
        result = runner.invoke(app, ["ledger", "--state", state_file, "--on", "June 1"])
        assert result.exit_code != 0


class TestSuggestCommand:
    def test_single_strategy(self, state_file) -> None:
        result = runner.invoke(
            app,
            [
                "suggest",
                "--state",
                state_file,
                "--strategy",
                "long-weekends",
                "--holiday",
                "2024-07-04",
                "--holiday",
                "2024-11-28",
            ],
        )
        assert result.exit_code == 0
        assert "Long Weekends" in result.output
        assert "PTO left after plan:" in result.output
        assert "Generated 1 suggestion." in result.output

    def test_all_strategies(self, state_file) -> None:
        result = runner.invoke(app, ["suggest", "--state", state_file, "--strategy", "all"])
        assert result.exit_code == 0
        assert "Generated 5 suggestions." in result.output

    def test_calendar_view(self, state_file) -> None:
        result = runner.invoke(
            app, ["suggest", "--state", state_file, "--holiday", "2024-07-04", "--calendar"]
        )
        assert result.exit_code == 0
        assert "Calendar View 2024" in result.output

    def test_json_output(self, state_file) -> None:
        result = runner.invoke(
            app, ["suggest", "--state", state_file, "--strategy", "all", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["year"] == 2024
        assert data["pto_budget"] == 21.0
        assert len(data["plans"]) == 5
        for plan in data["plans"]:
            assert len(plan["pto_dates"]) <= 21
            assert plan["summary"]["total_pto_used"] == len(plan["pto_dates"])

    def test_invalid_strategy(self, state_file) -> None:
        result = runner.invoke(app, ["suggest", "--state", state_file, "--strategy", "bogus"])
        assert result.exit_code == 1
        assert "Invalid strategy" in result.output

    def test_apply_needs_single_strategy(self, state_file) -> None:
        result = runner.invoke(
            app, ["suggest", "--state", state_file, "--strategy", "all", "--apply"]
        )
        assert result.exit_code == 1

    def test_apply_updates_selection(self, state_file) -> None:
        result = runner.invoke(
            app,
            [
                "suggest",
                "--state",
                state_file,
                "--strategy",
                "mini-breaks",
                "--holiday",
                "2024-07-04",
                "--apply",
            ],
        )
        assert result.exit_code == 0
        assert "Added" in result.output
        with open(state_file) as f:
            state = PlannerState.from_json(f.read())
        assert 0 < len(state.selected_days) <= 21


class TestStrategiesCommand:
    def test_lists_strategies(self) -> None:
        result = runner.invoke(app, ["strategies"])
        assert result.exit_code == 0
        assert "long-weekends" in result.output
        assert "Extended Vacations" in result.output
        assert "No Strategy" not in result.output

    def test_log_level_option(self) -> None:
        result = runner.invoke(app, ["--log-level", "debug", "strategies"])
        assert result.exit_code == 0
