"""Tests for configuration, path constants, reference data and the CLI helpers."""

import io
import json
import sys
from pathlib import Path

import pytest

from intake.config import DEFAULT_CONFIG, load_config, resolve_token
from intake.main import load_draft, main, validate_only
from intake.notifications import ConsoleNotifier
from intake.reference import DomainValueError, ReferenceData, load_reference_data
from intake.schemas.models import IncidentDraft
from intake.submission.client import IncidentApiClient


# ── Paths ──


class TestPathConstants:

    def test_config_paths_under_project_root(self):
        from intake.paths import CONFIG_DIR, INTAKE_CONFIG_PATH, PROJECT_ROOT, REFERENCE_DATA_PATH
        assert isinstance(PROJECT_ROOT, Path)
        assert CONFIG_DIR.parent == PROJECT_ROOT
        assert INTAKE_CONFIG_PATH.parent == CONFIG_DIR
        assert INTAKE_CONFIG_PATH.name == "intake_config.json"
        assert REFERENCE_DATA_PATH.parent == CONFIG_DIR

    def test_shipped_config_loads(self):
        from intake.paths import INTAKE_CONFIG_PATH
        with open(INTAKE_CONFIG_PATH, encoding="utf-8") as f:
            data = json.load(f)
        assert data["api"]["submit_path"] == "/incidents/with-families"


# ── Config ──


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("INTAKE_API_BASE_URL", raising=False)
        config = load_config(tmp_path / "absent.json")
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_partial_file_merged(self, tmp_path, monkeypatch):
        monkeypatch.delenv("INTAKE_API_BASE_URL", raising=False)
        path = tmp_path / "intake_config.json"
        path.write_text(json.dumps({"api": {"base_url": "https://lgu.example.test/api"}}), encoding="utf-8")
        config = load_config(path)
        assert config["api"]["base_url"] == "https://lgu.example.test/api"
        assert config["api"]["submit_path"] == "/incidents/with-families"

    def test_env_overrides_base_url(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INTAKE_API_BASE_URL", "https://staging.example.test/api")
        config = load_config(tmp_path / "absent.json")
        assert config["api"]["base_url"] == "https://staging.example.test/api"

    def test_resolve_token(self, monkeypatch):
        monkeypatch.setenv("MY_TOKEN", "abc123")
        assert resolve_token({"api": {"key_env_var": "MY_TOKEN"}}) == "abc123"
        monkeypatch.setenv("MY_TOKEN", "")
        assert resolve_token({"api": {"key_env_var": "MY_TOKEN"}}) is None

    def test_client_reads_config(self):
        client = IncidentApiClient({"api": {"base_url": "https://x.test/api/", "request_timeout": 15}})
        assert client.submit_url == "https://x.test/api/incidents/with-families"
        assert client.request_timeout.total == 15

    def test_client_defaults_to_no_timeout(self):
        assert IncidentApiClient().request_timeout.total is None


# ── Reference data ──


class TestReferenceData:

    def test_builtin_vocabularies(self):
        reference = ReferenceData()
        assert len(reference.barangays) == 18
        assert reference.domain_for("category")[0] == "Infant (0-6 mos)"
        assert reference.domain_for("title") is None

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_reference_data(tmp_path / "absent.json") == ReferenceData()

    def test_partial_override(self, tmp_path):
        path = tmp_path / "reference_data.json"
        path.write_text(json.dumps({"barangays": ["ALPHA", "BETA"]}), encoding="utf-8")
        reference = load_reference_data(path)
        assert reference.barangays == ["ALPHA", "BETA"]
        assert "Flood" in reference.incident_types

    def test_check_draft(self):
        draft = IncidentDraft(families=[{"members": [{"ethnicity": "MARTIAN"}]}])
        with pytest.raises(DomainValueError, match="ethnicity"):
            ReferenceData().check_draft(draft)

    def test_check_draft_accepts_defaults(self):
        ReferenceData().check_draft(IncidentDraft())


# ── CLI helpers ──


class TestCli:

    def test_template_round_trips(self, tmp_path):
        path = tmp_path / "draft.json"
        path.write_text(IncidentDraft(total_families=2).model_dump_json(), encoding="utf-8")
        draft = load_draft(path)
        assert draft.total_families == 2

    def test_validate_only_exit_codes(self, capsys):
        assert validate_only(IncidentDraft()) == 1
        assert "Missing Basic Information" in capsys.readouterr().out

    def test_summary_flag_prints_confirmation_summary(self, tmp_path, monkeypatch, capsys):
        draft = IncidentDraft(location="Riverside", barangay="POBLACION", total_families=2)
        path = tmp_path / "draft.json"
        path.write_text(draft.model_dump_json(), encoding="utf-8")
        monkeypatch.setattr(sys, "argv", ["intake", "--draft", str(path), "--summary"])

        main()

        out = capsys.readouterr().out
        assert "Are you sure you want to report this incident?" in out
        assert "• 2 families affected" in out
        assert "• Location: Riverside, POBLACION" in out

    def test_console_confirm_declines_on_closed_stdin(self, monkeypatch):
        def closed_stdin(prompt=""):
            raise EOFError

        monkeypatch.setattr("builtins.input", closed_stdin)
        notifier = ConsoleNotifier(stream=io.StringIO())
        assert notifier.confirm("Confirm Incident Report", "Summary", "Yes", "No") is False

    def test_console_confirm_accepts_yes(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt="": "y")
        assert ConsoleNotifier(stream=io.StringIO()).confirm("Title", "Body") is True
