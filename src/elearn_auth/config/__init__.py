"""
elearn_auth.config

- AuthSettings / CORSSettings: plain settings objects for the auth core.
- settings_from_env: builds AuthSettings from ELEARN_* environment variables.
"""

from __future__ import annotations

from .env import settings_from_env, cors_settings_from_env
from .settings import AuthSettings, CORSSettings

__all__ = [
    "AuthSettings",
    "CORSSettings",
    "settings_from_env",
    "cors_settings_from_env",
]
