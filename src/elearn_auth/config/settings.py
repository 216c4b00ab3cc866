from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from ..adapters.bcrypt.hasher import DEFAULT_ROUNDS
from ..adapters.jwt.codec import DEFAULT_TTL_SECONDS, SUPPORTED_ALGORITHMS
from ..application.route_classifier import DEFAULT_PUBLIC_ROUTES, check_rules
from ..domain.exceptions import ConfigurationError
from ..domain.value_objects import RouteRule

MIN_SECRET_BYTES = 32


@dataclass(slots=True)
class CORSSettings:
    """
    Cross-origin settings for the CORS middleware that runs in front of the
    authentication gate.
    """
    allowed_origins: Tuple[str, ...] = ("https://e-learning-management.netlify.app",)
    allowed_methods: Tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
    allowed_headers: Tuple[str, ...] = ("Authorization", "Content-Type", "Accept")
    expose_headers: Tuple[str, ...] = (
        "Access-Control-Allow-Origin",
        "Access-Control-Allow-Methods",
    )
    allow_credentials: bool = False
    max_age: int = 3600


@dataclass(slots=True)
class AuthSettings:
    """
    Signing, hashing and routing settings for the auth core.

    Host code decides how to construct this (env, config file, etc.).
    Loaded once at startup and never mutated afterwards.
    """
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = DEFAULT_TTL_SECONDS
    bcrypt_rounds: int = DEFAULT_ROUNDS
    public_routes: Tuple[RouteRule, ...] = DEFAULT_PUBLIC_ROUTES
    # answer 401 for anonymous requests to any private route, guarded or not
    deny_anonymous: bool = False
    cors: CORSSettings = field(default_factory=CORSSettings)

    def __post_init__(self) -> None:
        if len(self.jwt_secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ConfigurationError(
                f"JWT secret must be at least {MIN_SECRET_BYTES} bytes"
            )
        if self.jwt_algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(
                f"Unsupported JWT algorithm {self.jwt_algorithm!r}, "
                f"expected one of {SUPPORTED_ALGORITHMS}"
            )
        if self.token_ttl_seconds <= 0:
            raise ConfigurationError("Token TTL must be positive")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ConfigurationError("bcrypt rounds must be between 4 and 31")
        self.public_routes = check_rules(self.public_routes)

    def __repr__(self) -> str:
        return (
            f"AuthSettings(jwt_secret='***', jwt_algorithm={self.jwt_algorithm!r}, "
            f"token_ttl_seconds={self.token_ttl_seconds}, "
            f"bcrypt_rounds={self.bcrypt_rounds}, "
            f"public_routes={[str(r) for r in self.public_routes]}, "
            f"deny_anonymous={self.deny_anonymous})"
        )
