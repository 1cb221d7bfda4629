from importlib import reload

from sqlalchemy import text


def test_settings_from_env():
    from app import config
    from app.db import database

    assert config.settings.DATABASE_URL == "sqlite:///:memory:"
    assert str(database.engine.url) == "sqlite:///:memory:"
    with database.engine.connect() as conn:
        result = conn.execute(text("SELECT 1")).scalar()
        assert result == 1


def test_sqlite_foreign_keys_enabled():
    from app.db import database

    with database.engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1


def test_empty_env_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_SIZE_MB", "")
    monkeypatch.setenv("STORAGE_BUCKET", "")
    monkeypatch.setenv("ENVIRONMENT", "production")

    from app import config as config_module

    try:
        reload(config_module)
        assert config_module.settings.MAX_UPLOAD_SIZE_MB == 50
        assert config_module.settings.max_upload_size_bytes == 50 * 1024 * 1024
        assert config_module.settings.STORAGE_BUCKET == "audio-files"
        assert config_module.settings.secure_cookies is True
    finally:
        monkeypatch.undo()
        reload(config_module)
