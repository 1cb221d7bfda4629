"""Application-wide configuration loader.

Every setting is read from the environment once, at import time, and exposed
through the module-level ``settings`` singleton that other modules import.
"""

import os


class Settings:
    """Settings helper that gracefully falls back to sane defaults.

    Rationale
    ---------
    When docker-compose injects an environment variable whose value is empty
    (e.g. `DATABASE_URL=""`) ``os.getenv("DATABASE_URL", default)`` returns an
    empty string *not* ``None``, and that empty string would override the
    in-code default.  Every setting therefore uses the idiom

        os.getenv(KEY) or DEFAULT

    so that *falsy* values ("", None) are replaced by the specified DEFAULT.
    """

    DATABASE_URL: str = os.getenv('DATABASE_URL') or 'postgresql://review:review@db:5432/review'
    DB_ECHO: bool = (os.getenv('DB_ECHO') or '0').lower() in ('1', 'true', 'yes')

    STORAGE_BUCKET: str = os.getenv('STORAGE_BUCKET') or 'audio-files'
    PUBLIC_BASE_URL: str = (os.getenv('PUBLIC_BASE_URL') or '').rstrip('/')
    MAX_UPLOAD_SIZE_MB: int = int(os.getenv('MAX_UPLOAD_SIZE_MB') or '50')
    DEFAULT_LANGUAGE_TAG: str = os.getenv('DEFAULT_LANGUAGE_TAG') or 'pashto'

    SESSION_COOKIE_NAME: str = os.getenv('SESSION_COOKIE_NAME') or 'session_id'
    SESSION_COOKIE_MAX_AGE: int = int(os.getenv('SESSION_COOKIE_MAX_AGE') or str(60 * 60 * 24 * 365))

    ENVIRONMENT: str = os.getenv('ENVIRONMENT') or 'development'
    ENABLE_DEBUG_ENDPOINT: bool = (os.getenv('ENABLE_DEBUG_ENDPOINT') or '0').lower() in ('1', 'true', 'yes')

    LOG_DIR: str = os.getenv('LOG_DIR') or 'backend/logs'
    LOG_LEVEL: str = (os.getenv('LOG_LEVEL') or 'INFO').upper()

    @property
    def max_upload_size_bytes(self) -> int:
        """Per-file upload limit in bytes (0 means unlimited)."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def secure_cookies(self) -> bool:
        return self.ENVIRONMENT == 'production'


settings = Settings()
