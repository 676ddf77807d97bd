"""Unit tests for environment-based configuration.

Tests verify:
- defaults of the search conventions
- SHF_ prefixed environment overrides (JSON for list fields)
- normalization of extensions, folder names and aliases
- cached get_settings() behaviour
"""

import pytest
from pydantic import ValidationError

from student_hours.config.settings import Settings, get_settings


@pytest.mark.unit
def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.LOG_LEVEL == "INFO"
    assert settings.default_root is None
    assert settings.max_file_size_mb == 100
    assert settings.excel_extensions == [".xlsx", ".xls"]
    assert settings.excluded_dirs == ["node_modules", "dist", "build", "__pycache__"]
    assert settings.lock_file_marker == "~$"
    assert settings.identifier_aliases == ["cod", "código", "codigo", "fv", "fff"]
    assert settings.category_a_label == "revisiones pendientes cocurriculares"
    assert settings.category_b_label == "revisiones pendientes liderazgo"
    assert settings.pending_review_marker == "revisiones pendientes"
    assert settings.ignored_cell_values == ["-", "/"]


@pytest.mark.unit
def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("SHF_DEFAULT_ROOT", str(tmp_path))
    monkeypatch.setenv("SHF_MAX_FILE_SIZE_MB", "25")
    monkeypatch.setenv("SHF_EXCLUDED_DIRS", '["Respaldo", "node_modules"]')

    settings = Settings(_env_file=None)

    assert settings.default_root == str(tmp_path)
    assert settings.max_file_size_mb == 25
    assert settings.excluded_dirs == ["respaldo", "node_modules"]


@pytest.mark.unit
def test_log_level_read_without_prefix(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    assert Settings(_env_file=None).LOG_LEVEL == "DEBUG"


@pytest.mark.unit
def test_extensions_normalized():
    settings = Settings(_env_file=None, excel_extensions=["XLSX", " .Xls ", ""])

    assert settings.excel_extensions == [".xlsx", ".xls"]


@pytest.mark.unit
def test_aliases_lowercased():
    settings = Settings(_env_file=None, identifier_aliases=["COD", " Matrícula ", " "])

    assert settings.identifier_aliases == ["cod", "matrícula"]


@pytest.mark.unit
def test_invalid_size_rejected(monkeypatch):
    monkeypatch.setenv("SHF_MAX_FILE_SIZE_MB", "mucho")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.unit
def test_get_settings_is_cached():
    assert get_settings() is get_settings()


@pytest.mark.unit
def test_cache_clear_picks_up_environment(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("SHF_MAX_FILE_SIZE_MB", "3")
    get_settings.cache_clear()

    second = get_settings()

    assert second is not first
    assert second.max_file_size_mb == 3
