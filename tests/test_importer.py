"""Tests for filenames, async file reading and the import pipeline."""

import json
import logging
from datetime import datetime, timezone

import pytest

from conftest import make_member, make_sprint
from src.errors.taxonomy import ErrorSeverity, ErrorType
from src.serialization.csv_codec import encode_csv
from src.serialization.files import generate_filename, import_file, import_text, read_file_content
from src.serialization.json_codec import encode_json
from src.tracker.models import AppConfig, AppData


@pytest.fixture
def app_data():
    sprints = [make_sprint(1, velocity=0.4), make_sprint(2, velocity=0.6)]
    return AppData(sprints=sprints, config=AppConfig(velocity_calculation_sprints=3, team_members=[make_member()]))


class TestGenerateFilename:
    def test_format(self):
        now = datetime(2024, 3, 1, 9, 30, 15, 123000, tzinfo=timezone.utc)
        assert generate_filename("sprints", "csv", now) == "sprints_2024-03-01T09-30-15.csv"

    def test_defaults_to_now(self):
        name = generate_filename("backup", "json")
        assert name.startswith("backup_")
        assert name.endswith(".json")
        assert ":" not in name


class TestReadFileContent:
    @pytest.mark.asyncio
    async def test_reads_whole_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        assert await read_file_content(path) == '{"a": 1}'

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await read_file_content(tmp_path / "missing.json")


class TestImportText:
    def test_json(self, app_data, caplog):
        with caplog.at_level(logging.INFO, logger="src.serialization.files"):
            result = import_text(encode_json(app_data), "json")
        assert result.success
        assert [s.id for s in result.data.sprints] == ["sprint-1", "sprint-2"]
        assert result.data.config == app_data.config
        assert "Imported 2 sprint(s) from JSON" in caplog.text

    def test_json_recomputes_forecast(self, app_data):
        result = import_text(encode_json(app_data), "json")
        assert result.data.sprints[0].predicted_capacity == 0
        assert result.data.sprints[1].predicted_capacity == pytest.approx(0.4 * 52)

    def test_csv_uses_injected_defaults(self, app_data):
        custom = AppConfig(velocity_calculation_sprints=2)
        result = import_text(encode_csv(app_data.sprints), "csv", custom)
        assert result.success
        assert result.data.config is custom
        assert [s.sprint_name for s in result.data.sprints] == ["Sprint 1", "Sprint 2"]

    def test_csv_validation_failure(self, app_data):
        text = encode_csv([make_sprint(1, carry_over_points_completed=9)])
        result = import_text(text, "csv")
        assert not result.success
        assert result.error.type is ErrorType.VALIDATION
        assert "Sprint 1: Carry over completed points" in result.error.user_message

    def test_json_validation_failure(self, app_data, caplog):
        payload = app_data.to_dict()
        payload["sprints"][0]["plannedPoints"] = 99
        result = import_text(json.dumps(payload), "json")
        assert result.error.type is ErrorType.VALIDATION
        assert "Sprint 1: Planned points calculation is inconsistent" in result.error.user_message
        assert "JSON import rejected" in caplog.text

    def test_json_integrity_failure(self, app_data):
        payload = app_data.to_dict()
        payload["sprints"][0]["id"] = ""
        result = import_text(json.dumps(payload), "json")
        assert result.error.type is ErrorType.DATA_CORRUPTION
        assert result.error.severity is ErrorSeverity.HIGH

    def test_json_overflowing_people_count(self, app_data):
        payload = app_data.to_dict()
        payload["sprints"][0]["numberOfPeople"] = "HUGE"
        text = json.dumps(payload).replace('"HUGE"', "1e400")
        result = import_text(text, "json")
        assert not result.success
        assert result.error.type is ErrorType.VALIDATION
        assert "Sprint 1: Number of people must be no more than" in result.error.user_message

    def test_malformed_json(self):
        result = import_text("{", "json")
        assert result.error.type is ErrorType.DATA_CORRUPTION
        assert result.error.details["kind"] == "syntax"

    def test_unsupported_format(self):
        result = import_text("a,b", "xlsx")
        assert result.error.type is ErrorType.VALIDATION
        assert "Unsupported import format: xlsx" in result.error.user_message


class TestImportFile:
    @pytest.mark.asyncio
    async def test_json_file(self, tmp_path, app_data):
        path = tmp_path / "sprints.json"
        path.write_text(encode_json(app_data), encoding="utf-8")
        result = await import_file(path)
        assert result.success
        assert len(result.data.sprints) == 2

    @pytest.mark.asyncio
    async def test_csv_file(self, tmp_path, app_data):
        path = tmp_path / "sprints.CSV"
        path.write_text(encode_csv(app_data.sprints), encoding="utf-8")
        result = await import_file(path)
        assert result.success
        assert result.data.config == AppConfig()

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        result = await import_file(tmp_path / "missing.json")
        assert not result.success
        assert result.error.type is ErrorType.FILE_SYSTEM
        assert result.error.details["code"] == "ENOENT"
        assert result.error.severity is ErrorSeverity.LOW

    @pytest.mark.asyncio
    async def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        result = await import_file(path)
        assert result.error.type is ErrorType.VALIDATION
