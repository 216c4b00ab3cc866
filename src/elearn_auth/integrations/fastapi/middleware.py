from __future__ import annotations

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_401_UNAUTHORIZED
from starlette.types import ASGIApp

from ...domain.entities import RequestContext
from ...domain.exceptions import AuthenticationError
from ..common.auth_factory import AuthDependencies
from .security import AUTH_CONTEXT_ATTR

logger = logging.getLogger(__name__)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Runs the authentication gate once per request and stores the resulting
    RequestContext on `request.state.auth_context`.

    The gate itself never short-circuits a request: anonymous and rejected
    requests are forwarded, and route dependencies decide whether a
    principal is needed. With `deny_anonymous=True` a second step runs after
    the gate and answers 401 for any private route that has no principal,
    whether or not the route declares a dependency.
    """

    def __init__(
            self,
            app: ASGIApp,
            auth: AuthDependencies,
            deny_anonymous: bool = False,
    ) -> None:
        super().__init__(app)
        self.auth = auth
        self.deny_anonymous = deny_anonymous

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        context = RequestContext(method=request.method, path=request.url.path)
        decision = self.auth.authenticate_request(
            context,
            request.headers.get("Authorization"),
        )
        setattr(request.state, AUTH_CONTEXT_ATTR, context)
        logger.debug("Gate decision for %s %s: %s",
                     request.method, request.url.path, decision.value)

        if self.deny_anonymous:
            try:
                self.auth.check_private_access(context)
            except AuthenticationError as exc:
                logger.info("Denied anonymous request: %s %s",
                            request.method, request.url.path)
                return JSONResponse(
                    {"detail": str(exc)},
                    status_code=HTTP_401_UNAUTHORIZED,
                    headers={"WWW-Authenticate": "Bearer"},
                )

        return await call_next(request)
