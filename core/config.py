# ---------- config.py ----------
"""Configuration helpers: .env, Streamlit secrets and environment variables."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

# Optionally load environment variables from a local .env file.
# This keeps local development easy.
try:
    from dotenv import load_dotenv

    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)
except ImportError:
    pass

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
SQLITE_PATH_DEFAULT = "data/store_dashboard.db"

_ENV_KEYS = {
    "host": "SUPABASE_DB_HOST",
    "port": "SUPABASE_DB_PORT",
    "database": "SUPABASE_DB_NAME",
    "user": "SUPABASE_DB_USER",
    "password": "SUPABASE_DB_PASSWORD",
}


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the app."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )


def _secrets_section(name: str) -> Optional[Dict[str, Any]]:
    try:
        import streamlit as st

        if name in st.secrets:
            return dict(st.secrets[name])
    except Exception:
        # No secrets.toml or running outside Streamlit.
        return None
    return None


def get_postgres_settings() -> Optional[Dict[str, Any]]:
    """Return psycopg2 connect kwargs for the hosted database, or None.

    Looks at the ``[postgres]`` section of Streamlit secrets first, then at
    ``DATABASE_URL`` and the ``SUPABASE_DB_*`` environment variables.
    """
    section = _secrets_section("postgres")
    if section:
        return {
            "host": section["host"],
            "port": int(section.get("port", 5432)),
            "database": section.get("database", "postgres"),
            "user": section["user"],
            "password": section["password"],
        }

    url = os.getenv("DATABASE_URL")
    if url:
        return {"dsn": url}

    values = {key: os.getenv(env) for key, env in _ENV_KEYS.items()}
    if values["host"] and values["user"] and values["password"]:
        values["port"] = int(values["port"] or 5432)
        values["database"] = values["database"] or "postgres"
        return values
    return None


def get_sqlite_path() -> str:
    return os.getenv("SQLITE_PATH", SQLITE_PATH_DEFAULT)
