"""
Configuration - Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed application configuration using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- Every field has a default suited to a local SQLite deployment, so the
  application starts without a `.env` file.
- `extra="ignore"`: unknown env vars are ignored (not an error).

Persistence choice
------------------
`DB_DRIVER_NAME` selects exactly one persistence backend per deployment:
- `postgresql+psycopg2` (or any server driver) for the shared REST backend
- `sqlite` for a single-device store (``DB_DATABASE_NAME`` is the file path)

Usage
-----
from linkme.database.config.config import settings

db_driver = settings.DB_DRIVER_NAME
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DB_DRIVER_NAME: str = Field("sqlite", description="Database driver (e.g., `postgresql+psycopg2`, `sqlite`).")
    DB_USERNAME: Optional[str] = Field(None, description="Database username credential.")
    DB_PASSWORD: Optional[str] = Field(None, description="Database password credential.")
    DB_HOST: Optional[str] = Field(None, description="Hostname or IP address of the database server.")
    DB_PORT: Optional[int] = Field(None, description="Port of the database server.")
    DB_DATABASE_NAME: str = Field("linkme.db", description="Database name, or file path for SQLite.")
    FRONTEND_URL: str = Field("http://localhost:8081", description="Origin of the mobile/web client allowed by CORS.")
    INIT_MODE: str = Field("runtime", description="`runtime` creates missing tables at startup; anything else skips it.")
    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG, INFO, WARNING, ...).")
    SQLITE_BUSY_TIMEOUT: float = Field(30.0, description="Seconds a SQLite connection waits for the write lock before failing.")
    GREETING_TEMPLATE: str = Field(
        'Hi! I would like to help you with your request: "{preview}..."',
        description="Message posted by a volunteer when accepting a request. `{preview}` is the description excerpt.",
    )


# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the .env file"""
