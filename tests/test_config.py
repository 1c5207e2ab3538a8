"""
Tests for the Shared Module.
============================

Tests for:
- Settings: YAML defaults, environment overrides, derived paths
- Utils: JSON I/O, lenient JSON fields, date and text formatting
- Logging: temporary log levels
"""

import logging
from datetime import date
from pathlib import Path

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Settings Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestSettings:
    """Tests for configuration loading."""

    def test_yaml_defaults_loaded(self, config_path: Path):
        """Test that settings.yaml populates the nested sections."""
        from researchconnect.shared.config import get_settings

        assert config_path.exists()
        settings = get_settings()

        assert settings.api.base_url == "http://localhost:8080/v1"
        assert settings.projects.page_size == 20
        assert settings.projects.max_page_size == 100
        assert settings.roadmap.research.min_goals_length == 20
        assert settings.roadmap.placement.timeline_weeks == 12

    def test_settings_cached(self):
        """Test that get_settings returns a singleton."""
        from researchconnect.shared.config import get_settings

        assert get_settings() is get_settings()

    def test_env_overrides_api_url(self, monkeypatch):
        """Test that RESEARCHCONNECT_API_URL wins over the YAML value."""
        from researchconnect.shared.config import reload_settings

        monkeypatch.setenv("RESEARCHCONNECT_API_URL", "https://api.example.org/v1/")
        settings = reload_settings()

        assert settings.get_effective_api_url() == "https://api.example.org/v1"

    def test_env_overrides_timeout_and_log_level(self, monkeypatch):
        """Test that API_TIMEOUT and LOG_LEVEL override the YAML values."""
        from researchconnect.shared.config import reload_settings

        monkeypatch.setenv("API_TIMEOUT", "7")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = reload_settings()

        assert settings.get_effective_timeout() == 7
        assert settings.get_effective_log_level() == "DEBUG"

    def test_base_url_trailing_slash_stripped(self):
        """Test that trailing slashes are stripped from the base URL."""
        from researchconnect.shared.config import ApiConfig

        assert ApiConfig(base_url="http://host/v1///").base_url == "http://host/v1"

    def test_token_file_relative_to_project_root(self):
        """Test that a relative token path resolves under the project root."""
        from researchconnect.shared.config import Settings, SessionConfig

        settings = Settings(session=SessionConfig(token_file="data/session.json"))
        assert settings.token_file == settings.project_root / "data" / "session.json"

    def test_token_file_absolute_kept(self, temp_dir: Path):
        """Test that an absolute token file path is used as is."""
        from researchconnect.shared.config import Settings, SessionConfig

        target = temp_dir / "token.json"
        settings = Settings(session=SessionConfig(token_file=str(target)))
        assert settings.token_file == target


# ─────────────────────────────────────────────────────────────────────────────
# Utils Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestUtils:
    """Tests for utility helpers."""

    def test_save_and_load_json(self, temp_dir: Path):
        """Test atomic JSON save creates parents and leaves no temp files."""
        from researchconnect.shared.utils import load_json, save_json

        target = temp_dir / "nested" / "data.json"
        save_json(target, {"token": "abc", "n": 1})

        assert load_json(target) == {"token": "abc", "n": 1}
        assert [p.name for p in target.parent.iterdir()] == ["data.json"]

    @pytest.mark.parametrize(
        "value,expected",
        [
            ('["ML", "Algorithms"]', ["ML", "Algorithms"]),
            (["already", "a list"], ["already", "a list"]),
            ("not json", []),
            ('{"a": 1}', []),
            ("", []),
            (None, []),
        ],
    )
    def test_parse_json_list(self, value, expected):
        """Test lenient decoding of JSON list fields."""
        from researchconnect.shared.utils import parse_json_list

        assert parse_json_list(value) == expected

    def test_parse_json_object(self):
        """Test that only JSON objects decode to a dict."""
        from researchconnect.shared.utils import parse_json_object

        assert parse_json_object('{"dsa": "beginner"}') == {"dsa": "beginner"}
        assert parse_json_object("[1, 2]") == {}
        assert parse_json_object("{broken") == {}

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2026-10-19", date(2026, 10, 19)),
            ("2026-10-19T08:30:00Z", date(2026, 10, 19)),
            ("2026-10-19 08:30:00.123456+05:30", date(2026, 10, 19)),
            ("", None),
            (None, None),
            ("someday", None),
        ],
    )
    def test_parse_date(self, value, expected):
        """Test parsing the API's date formats."""
        from researchconnect.shared.utils import parse_date

        assert parse_date(value) == expected

    def test_format_date(self):
        """Test display formatting of dates."""
        from researchconnect.shared.utils import format_date

        assert format_date("2026-10-19T08:30:00Z") == "Oct 19, 2026"
        assert format_date("2026-03-05") == "Mar 5, 2026"
        assert format_date("") == "N/A"
        assert format_date("garbage") == "N/A"

    def test_initials(self):
        """Test initials for full and empty names."""
        from researchconnect.shared.utils import initials

        assert initials("grace brewster hopper") == "GBH"
        assert initials("") == "?"
        assert initials("   ") == "?"

    def test_truncate_text(self):
        """Test truncating long text with an ellipsis."""
        from researchconnect.shared.utils import truncate_text

        assert truncate_text("short", 10) == "short"
        result = truncate_text("a" * 50, 10)
        assert len(result) == 10
        assert result.endswith("...")


# ─────────────────────────────────────────────────────────────────────────────
# Logging Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestLogging:
    """Tests for logging helpers."""

    def test_log_context_restores_levels(self):
        """Test that LogContext restores logger and handler levels."""
        from researchconnect.shared.logging import LogContext, get_logger

        get_logger(__name__)
        target = logging.getLogger("researchconnect.test_ctx")
        target.setLevel(logging.WARNING)
        root_handlers = logging.getLogger().handlers
        before = [h.level for h in root_handlers]

        with LogContext("DEBUG", "researchconnect.test_ctx"):
            assert target.level == logging.DEBUG
            assert all(h.level <= logging.DEBUG for h in root_handlers)

        assert target.level == logging.WARNING
        assert [h.level for h in root_handlers] == before

    def test_setup_logging_force_replaces_handlers(self, tmp_path):
        """Test that a forced setup swaps handlers instead of stacking them."""
        from researchconnect.shared.logging import setup_logging

        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        log_file = tmp_path / "logs" / "client.log"

        try:
            setup_logging(level="DEBUG", use_rich=False, log_file=str(log_file), force=True)
            setup_logging(level="WARNING", use_rich=False, log_file=str(log_file), force=True)

            assert root.level == logging.WARNING
            assert len(root.handlers) == 2
            assert log_file.parent.exists()

            logging.getLogger("researchconnect.test_file").warning("written to file")
            for handler in root.handlers:
                handler.flush()
            assert "written to file" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
