"""Application configuration read from environment variables."""

import os

# Setting name -> (default, type)
DEFAULTS = {
    "SERVICE_NAME": ("taskboard-backend", str),
    "SUPABASE_URL": ("", str),
    "SUPABASE_SERVICE_ROLE_KEY": ("", str),
    "JWT_SECRET": ("", str),
    "JWT_ALGORITHM": ("HS256", str),
    "JWT_EXPIRES_IN_HOURS": (24, int),
    "BCRYPT_ROUNDS": (10, int),
    "DEFAULT_PAGE_SIZE": (10, int),
    "MAX_PAGE_SIZE": (100, int),
}


def _read(name: str):
    default, cast = DEFAULTS[name]
    return cast(os.environ.get(name, default))


class AppConfig:
    """Centralized application configuration."""

    SERVICE_NAME = _read("SERVICE_NAME")

    SUPABASE_URL = _read("SUPABASE_URL")
    SUPABASE_SERVICE_ROLE_KEY = _read("SUPABASE_SERVICE_ROLE_KEY")

    JWT_SECRET = _read("JWT_SECRET")
    JWT_ALGORITHM = _read("JWT_ALGORITHM")
    JWT_EXPIRES_IN_HOURS = _read("JWT_EXPIRES_IN_HOURS")

    BCRYPT_ROUNDS = _read("BCRYPT_ROUNDS")

    DEFAULT_PAGE_SIZE = _read("DEFAULT_PAGE_SIZE")
    MAX_PAGE_SIZE = _read("MAX_PAGE_SIZE")

    @classmethod
    def reload(cls) -> None:
        """Re-read settings from the environment (used by tests)."""
        for name in DEFAULTS:
            setattr(cls, name, _read(name))
