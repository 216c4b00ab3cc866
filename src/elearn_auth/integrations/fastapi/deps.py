from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials

from ...config.settings import AuthSettings, CORSSettings
from ...domain.constants import Role
from ...domain.entities import Principal, RequestContext
from ...domain.exceptions import AuthenticationError, AuthorizationError
from ..common.auth_factory import AuthDependencies
from .decorators import FastAPIDecorators
from .middleware import AuthenticationMiddleware
from .security import bearer_scheme, get_or_create_context

UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


@dataclass(slots=True)
class FastAPIAuthorization:
    """
    FastAPI integration for elearn_auth.

    Built on top of the framework-agnostic AuthDependencies facade. The
    gate attaches the principal (or nothing); these dependencies make the
    per-route decision.
    """

    auth: AuthDependencies
    settings: Optional[AuthSettings] = None

    # ------------------------------------------------------------------ #
    # App wiring
    # ------------------------------------------------------------------ #

    def install(
            self,
            app: FastAPI,
            cors: Optional[CORSSettings] = None,
            *,
            deny_anonymous: Optional[bool] = None,
    ) -> FastAPI:
        """
        Add the gate middleware and, when CORS settings are given (or known
        from `self.settings`), the CORS middleware in front of it so
        preflights never reach the gate.

        `deny_anonymous` (default: `settings.deny_anonymous`, else False)
        makes every private route answer 401 to anonymous callers, even
        routes without an auth dependency.
        """
        if deny_anonymous is None:
            deny_anonymous = self.settings.deny_anonymous if self.settings is not None else False
        app.add_middleware(
            AuthenticationMiddleware,
            auth=self.auth,
            deny_anonymous=deny_anonymous,
        )
        if cors is None and self.settings is not None:
            cors = self.settings.cors
        if cors is not None:
            app.add_middleware(
                CORSMiddleware,
                allow_origins=list(cors.allowed_origins),
                allow_methods=list(cors.allowed_methods),
                allow_headers=list(cors.allowed_headers),
                expose_headers=list(cors.expose_headers),
                allow_credentials=cors.allow_credentials,
                max_age=cors.max_age,
            )
        return app

    def decorators(self) -> FastAPIDecorators:
        """Decorator flavour of the dependencies below."""
        return FastAPIDecorators(auth=self.auth)

    # ------------------------------------------------------------------ #
    # Base dependencies
    # ------------------------------------------------------------------ #

    async def get_request_context(self, request: Request) -> RequestContext:
        """Dependency: the request's authentication state."""
        return get_or_create_context(request, self.auth)

    async def get_current_principal(
            self,
            request: Request,
            credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> Principal:
        """Dependency: Require authentication."""
        context = get_or_create_context(request, self.auth)
        try:
            return self.auth.authorize(context.principal, [])
        except AuthenticationError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
                headers=UNAUTHORIZED_HEADERS,
            ) from exc

    async def get_optional_principal(self, request: Request) -> Optional[Principal]:
        """Dependency: Optional authentication."""
        return get_or_create_context(request, self.auth).principal

    # ------------------------------------------------------------------ #
    # Authorization dependency factories
    # ------------------------------------------------------------------ #

    def require_roles(self, *roles: Role | str) -> Callable:
        """
        Dependency factory: require any of the given roles.

        Anonymous requests get 401, authenticated ones with another role 403.
        """
        requirement = self.auth.require_roles(any_of=roles)

        async def dependency(
                principal: Principal = Depends(self.get_current_principal),
        ) -> Principal:
            try:
                return self.auth.authorize(principal, [requirement])
            except AuthorizationError as exc:
                raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                                    detail=str(exc)) from exc

        return dependency


"""

from elearn_auth.integrations.fastapi import create_fastapi_auth
from elearn_auth.domain.constants import Role

fastapi_auth = create_fastapi_auth()           # settings from ELEARN_* env
app = fastapi_auth.install(FastAPI())      # CORS + gate middleware

get_current_principal = fastapi_auth.get_current_principal
require_admin = fastapi_auth.require_roles(Role.ADMIN)

@app.delete("/courses/{course_id}")
async def delete_course(course_id: int, principal: Principal = Depends(require_admin)):
    ...

"""
