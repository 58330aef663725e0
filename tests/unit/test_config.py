import pytest

from src.app_shell.config import Settings, validate_ops_rules


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("JOURNAL_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("JOURNAL_BACKEND", "memory")

    settings = Settings()

    assert settings.backend == "memory"
    assert settings.db_path == str(tmp_path / "journal.db")


def test_missing_required_env_exits(rules, monkeypatch, tmp_path):
    rules.ops.required_env = ["JOURNAL_TEST_REQUIRED"]
    monkeypatch.delenv("JOURNAL_TEST_REQUIRED", raising=False)

    with pytest.raises(SystemExit):
        validate_ops_rules(rules, Settings(data_dir=tmp_path, backend="memory"))


def test_unknown_backend_exits(rules, tmp_path):
    with pytest.raises(SystemExit):
        validate_ops_rules(rules, Settings(data_dir=tmp_path, backend="postgres"))


def test_sqlite_backend_creates_data_dir(rules, tmp_path):
    data_dir = tmp_path / "nested" / "data"

    validate_ops_rules(rules, Settings(data_dir=data_dir, backend="sqlite"))

    assert data_dir.is_dir()
