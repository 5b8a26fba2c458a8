"""Tests for pydantic-settings configuration."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

import readmark
from readmark.config import LoggingConfig, Settings, ValidationConfig, get_settings

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith(("VALIDATION__", "LOGGING__")):
            monkeypatch.delenv(key, raising=False)


class TestValidationConfig:
    """ValidationConfig sub-model tests."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Drift tolerance 1, sentence limit 500, expansion on drift."""
        _clear_env(monkeypatch)
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.validation.drift_tolerance == 1
        assert s.validation.sentence_expansion_limit == 500
        assert s.validation.sentence_expansion_on_drift is True

    def test_override_via_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """VALIDATION__DRIFT_TOLERANCE env var overrides the default."""
        monkeypatch.setenv("VALIDATION__DRIFT_TOLERANCE", "3")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.validation.drift_tolerance == 3

    def test_rejects_negative_tolerance(self) -> None:
        """Tolerance cannot be negative."""
        with pytest.raises(ValidationError):
            ValidationConfig(drift_tolerance=-1)

    def test_get_settings_is_cached(self) -> None:
        """get_settings returns the same instance until the cache is cleared."""
        assert get_settings() is get_settings()


class TestLoggingConfig:
    """LoggingConfig sub-model tests."""

    def test_level_is_normalised(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Levels are upper-cased."""
        monkeypatch.setenv("LOGGING__LEVEL", "debug")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.logging.level == "DEBUG"

    def test_unknown_level_rejected(self) -> None:
        """Unknown level names fail validation."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")


class TestSetupLogging:
    """readmark.setup_logging tests."""

    @pytest.fixture
    def _restore_root_handlers(self) -> Generator[None]:
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers = handlers
        root.setLevel(level)

    @pytest.mark.usefixtures("_restore_root_handlers")
    def test_writes_rotating_log_file(self, tmp_path: Path) -> None:
        """Log records reach the file under the given directory."""
        log_file = readmark.setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("readmark.test").debug("hello from test")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file == tmp_path / "logs" / "readmark.log"
        assert "hello from test" in log_file.read_text(encoding="utf-8")
