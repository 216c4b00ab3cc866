from __future__ import annotations

from typing import Optional

from ...config.env import settings_from_env
from ...config.settings import AuthSettings
from ...domain.ports import CredentialStore, UserRegistry
from ..common.auth_factory import AuthDependencies, create_auth_dependencies
from .decorators import FastAPIDecorators
from .deps import FastAPIAuthorization
from .middleware import AuthenticationMiddleware
from .routes import create_auth_router


def create_fastapi_auth(
    settings: Optional[AuthSettings] = None,
    *,
    credential_store: Optional[CredentialStore] = None,
    registry: Optional[UserRegistry] = None,
) -> FastAPIAuthorization:
    """
    High-level helper for FastAPI apps:

    - Reads AuthSettings from the ELEARN_* environment unless given
    - Creates AuthDependencies around the credential store
    - Wraps them in FastAPIAuthorization, exposing:

        fastapi_auth.install(app)
        fastapi_auth.get_current_principal
        fastapi_auth.get_optional_principal
        fastapi_auth.require_roles(...)
        fastapi_auth.decorators()
    """
    settings = settings or settings_from_env()
    auth: AuthDependencies = create_auth_dependencies(
        settings,
        credential_store=credential_store,
        registry=registry,
    )
    return FastAPIAuthorization(auth=auth, settings=settings)


__all__ = [
    "AuthenticationMiddleware",
    "FastAPIAuthorization",
    "FastAPIDecorators",
    "create_auth_router",
    "create_fastapi_auth",
]
