"""
Test the CLI

Recognition is stubbed at pytesseract.image_to_string, so the extract
command runs the real provider without the tesseract binary.
"""
import pytest
import pytesseract
from PIL import Image
from typer.testing import CliRunner

from inbody_tracker.adapters.cli.main import app
from inbody_tracker.domain.exceptions import StorageUnavailable
from inbody_tracker.infrastructure.persistence.body_composition_repo import (
    SQLiteBodyCompositionRepository,
)

pytestmark = pytest.mark.integration

runner = CliRunner()


@pytest.fixture
def env(tmp_path):
    return {
        "DB_PATH": str(tmp_path / "cli-test.db"),
        "INBODY_OWNER_ID": "alice",
        "LOG_LEVEL": "WARNING",
    }


def test_add_then_history(env):
    added = runner.invoke(
        app,
        ["add", "--date", "2024-03-01", "--weight", "82", "--muscle", "35", "--fat", "21"],
        env=env,
    )
    assert added.exit_code == 0, added.output

    history = runner.invoke(app, ["history"], env=env)

    assert history.exit_code == 0
    assert "2024-03-01" in history.output


def test_add_reports_field_errors(env):
    result = runner.invoke(
        app,
        ["add", "--date", "2024-03-01", "--weight", "500", "--muscle", "35", "--fat", "21"],
        env=env,
    )

    assert result.exit_code == 2
    assert "Weight must be between 20-300 kg" in result.output


def test_insights_with_two_records(env):
    for day, weight in (("2024-03-01", "82"), ("2024-03-15", "80")):
        runner.invoke(
            app, ["add", "--date", day, "--weight", weight, "--muscle", "35", "--fat", "21"], env=env,
        )

    result = runner.invoke(app, ["insights"], env=env)

    assert result.exit_code == 0
    assert "-2.0 kg" in result.output
    assert "14 days" in result.output


def test_unknown_window(env):
    result = runner.invoke(app, ["insights", "--window", "weekly"], env=env)

    assert result.exit_code == 2


def test_attend_and_adherence(env):
    logged = runner.invoke(app, ["attend", "trained", "--date", "2024-03-01"], env=env)
    assert logged.exit_code == 0

    summary = runner.invoke(app, ["adherence"], env=env)

    assert summary.exit_code == 0
    assert "Consistency" in summary.output


def test_storage_unavailable_exits_with_retry_hint(tmp_path, env):
    env["DB_PATH"] = str(tmp_path / "missing-dir" / "inbody.db")

    result = runner.invoke(app, ["history"], env=env)

    assert result.exit_code == 1
    assert "retry" in result.output


@pytest.fixture
def report(tmp_path, monkeypatch):
    """Write a report image; returns a setter for the text it is read as."""
    path = tmp_path / "report.png"
    Image.new("RGB", (40, 20), "white").save(path, format="PNG")

    def read_as(text: str):
        monkeypatch.setattr(pytesseract, "image_to_string", lambda image, lang=None: text)
        return str(path)

    return read_as


@pytest.fixture
def flaky_storage(monkeypatch):
    """The first record write fails as if the database were locked."""
    calls = []
    real_upsert = SQLiteBodyCompositionRepository.upsert_by_date

    async def upsert_by_date(self, record):
        calls.append(record)
        if len(calls) == 1:
            raise StorageUnavailable("database is locked")
        return await real_upsert(self, record)

    monkeypatch.setattr(SQLiteBodyCompositionRepository, "upsert_by_date", upsert_by_date)
    return calls


def test_extract_complete_read_no_save(env, report):
    path = report("Weight: 78.4 kg\nSkeletal Muscle Mass: 34.2\nPBF 22.5")

    result = runner.invoke(app, ["extract", path, "--no-save"], env=env)

    assert result.exit_code == 0, result.output
    assert "complete" in result.output
    assert "78.4" in result.output
    assert "Saved" not in result.output
    assert "No measurements yet" in runner.invoke(app, ["history"], env=env).output


def test_extract_failed_read_falls_back_to_manual_entry(env, report):
    path = report("Height 175 cm")

    result = runner.invoke(app, ["extract", path], env=env, input="2024-03-01\n80\n35\n20\n")

    assert result.exit_code == 0, result.output
    assert "Could not read the report" in result.output
    assert "Saved" in result.output
    assert "(manual)" in result.output
    history = runner.invoke(app, ["history"], env=env)
    assert "2024-03-01" in history.output
    assert "manual" in history.output


def test_extract_partial_read_reprompts_only_invalid_fields(env, report):
    path = report("Weight: 78.4 kg\nPBF 22.5")

    # date, weight (kept), muscle out of range, fat (kept), then muscle again
    result = runner.invoke(
        app, ["extract", path], env=env, input="2024-03-01\n\n500\n\n34.2\n",
    )

    assert result.exit_code == 0, result.output
    assert "Some values are missing" in result.output
    assert "Muscle mass cannot exceed 150 kg" in result.output
    assert "Saved" in result.output
    assert "(ocr)" in result.output
    history = runner.invoke(app, ["history"], env=env)
    assert "34.2" in history.output
    assert "78.4" in history.output


def test_extract_keeps_values_when_storage_fails(env, report, flaky_storage):
    path = report("Weight: 78.4 kg\nPBF 22.5")

    result = runner.invoke(app, ["extract", path], env=env, input="2024-03-01\n\n34.2\n\ny\n")

    assert result.exit_code == 0, result.output
    assert "Storage is unavailable" in result.output
    assert "Saved" in result.output
    assert len(flaky_storage) == 2
    history = runner.invoke(app, ["history"], env=env)
    assert "2024-03-01" in history.output
    assert "34.2" in history.output


def test_extract_declined_retry_exits_without_saving(env, report, flaky_storage):
    path = report("Weight: 78.4 kg\nPBF 22.5")

    result = runner.invoke(app, ["extract", path], env=env, input="2024-03-01\n\n34.2\n\nn\n")

    assert result.exit_code == 1
    assert "Saved" not in result.output
    assert len(flaky_storage) == 1


def test_dashboard_reads_trends_against_goal(env):
    for day, weight in (("2024-03-01", "82"), ("2024-03-15", "80")):
        runner.invoke(
            app, ["add", "--date", day, "--weight", weight, "--muscle", "35", "--fat", "21"], env=env,
        )

    result = runner.invoke(app, ["dashboard", "--goal", "lose_fat"], env=env)

    assert result.exit_code == 0, result.output
    assert "goal: lose_fat" in result.output
    assert "measurements: 2" in result.output
    assert "-2.0 kg" in result.output
    assert "down" in result.output
    assert "favorable" in result.output
