from __future__ import annotations

import os
from typing import Optional

from ..adapters.bcrypt.hasher import DEFAULT_ROUNDS
from ..adapters.jwt.codec import DEFAULT_TTL_SECONDS
from ..domain.value_objects import RouteRule
from .settings import AuthSettings, CORSSettings

ENV_PREFIX = "ELEARN_"


def _getenv(key: str) -> Optional[str]:
    return os.getenv(ENV_PREFIX + key)


def _int(key: str, default: int) -> int:
    raw = _getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{ENV_PREFIX}{key} must be an integer, got {raw!r}") from exc


def _bool(key: str, default: bool) -> bool:
    raw = _getenv(key)
    if raw is None:
        return default
    return str(raw).strip().lower() in {"1", "true", "yes", "on"}


def _split_csv(key: str) -> list[str]:
    raw = _getenv(key)
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x and x.strip()]


def cors_settings_from_env() -> CORSSettings:
    defaults = CORSSettings()
    return CORSSettings(
        allowed_origins=tuple(_split_csv("CORS_ALLOWED_ORIGINS")) or defaults.allowed_origins,
        allowed_methods=tuple(_split_csv("CORS_ALLOWED_METHODS")) or defaults.allowed_methods,
        allowed_headers=tuple(_split_csv("CORS_ALLOWED_HEADERS")) or defaults.allowed_headers,
        allow_credentials=_bool("CORS_ALLOW_CREDENTIALS", defaults.allow_credentials),
        max_age=_int("CORS_MAX_AGE", defaults.max_age),
    )


def settings_from_env() -> AuthSettings:
    secret = _getenv("JWT_SECRET")
    if not secret:
        raise RuntimeError(f"Missing auth settings: {ENV_PREFIX}JWT_SECRET")

    kwargs = {}
    routes = _split_csv("PUBLIC_ROUTES")
    if routes:
        kwargs["public_routes"] = tuple(RouteRule.parse(r) for r in routes)

    return AuthSettings(
        jwt_secret=secret,
        jwt_algorithm=(_getenv("JWT_ALGORITHM") or "HS256").strip(),
        token_ttl_seconds=_int("JWT_TTL_SECONDS", DEFAULT_TTL_SECONDS),
        bcrypt_rounds=_int("BCRYPT_ROUNDS", DEFAULT_ROUNDS),
        deny_anonymous=_bool("DENY_ANONYMOUS", False),
        cors=cors_settings_from_env(),
        **kwargs,
    )
