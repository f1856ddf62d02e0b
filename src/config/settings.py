"""
Document Q&A - Runtime Settings
===============================

Every tunable value used by the API, the provider client and the
Streamlit client lives here.  Values come from environment variables
(see :meth:`AppSettings.from_env`) and fall back to the defaults below.

Convention
----------
- Byte sizes are plain integers.
- ``provider_timeout_seconds = None`` means the transport default
  (no application-level timeout).
"""

from __future__ import annotations

import os
import tempfile
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_FRONTEND_ORIGIN = "http://localhost:5173"
DEFAULT_UPLOAD_DIR = os.path.join(tempfile.gettempdir(), "docqa_uploads")
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_MAX_JSON_BODY_BYTES = 50 * 1024 * 1024
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash-latest"
DEFAULT_GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_BACKEND_URL = "http://localhost:5001"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class AppSettings(BaseModel):
    """Validated application settings.

    Attributes:
        frontend_origin:          Only origin allowed by CORS.
        upload_dir:               Scratch directory for transient uploads.
        max_upload_bytes:         Upload size ceiling.
        max_json_body_bytes:      Ceiling for JSON request bodies.
        gemini_model:             Model id used for ``generateContent``.
        gemini_api_base:          Base URL of the Gemini REST API.
        provider_timeout_seconds: Optional transport timeout for the provider call.
        backend_url:              Where the Streamlit client finds the API.
        log_level:                Root log level for the API process.
    """

    frontend_origin: str = Field(default=DEFAULT_FRONTEND_ORIGIN)
    upload_dir: str = Field(default=DEFAULT_UPLOAD_DIR)
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    max_json_body_bytes: int = Field(default=DEFAULT_MAX_JSON_BODY_BYTES, gt=0)
    gemini_model: str = Field(default=DEFAULT_GEMINI_MODEL, min_length=1)
    gemini_api_base: str = Field(default=DEFAULT_GEMINI_API_BASE, min_length=1)
    provider_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    backend_url: str = Field(default=DEFAULT_BACKEND_URL)
    log_level: str = Field(default="INFO")

    @field_validator("frontend_origin", "gemini_api_base", "backend_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(_LOG_LEVELS)}, got {v!r}"
            )
        return level

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Build settings from environment variables, ignoring unset ones."""
        env_map = {
            "frontend_origin": "FRONTEND_ORIGIN",
            "upload_dir": "UPLOAD_DIR",
            "max_upload_bytes": "MAX_UPLOAD_BYTES",
            "max_json_body_bytes": "MAX_JSON_BODY_BYTES",
            "gemini_model": "GEMINI_MODEL",
            "gemini_api_base": "GEMINI_API_BASE",
            "provider_timeout_seconds": "PROVIDER_TIMEOUT_SECONDS",
            "backend_url": "BACKEND_URL",
            "log_level": "LOG_LEVEL",
        }
        values = {}
        for field_name, env_name in env_map.items():
            raw = os.environ.get(env_name)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Process-wide settings, read from the environment once."""
    return AppSettings.from_env()
