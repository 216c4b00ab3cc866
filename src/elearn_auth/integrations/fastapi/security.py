from __future__ import annotations

from fastapi import Request
from fastapi.security import HTTPBearer

from ...domain.entities import RequestContext
from ..common.auth_factory import AuthDependencies

# Expose this so apps can plug it into dependencies if they want OpenAPI security.
# The gate reads the raw header itself, so this never rejects anything.
bearer_scheme = HTTPBearer(auto_error=False)

AUTH_CONTEXT_ATTR = "auth_context"


def get_or_create_context(request: Request, auth: AuthDependencies) -> RequestContext:
    """
    Return the RequestContext the middleware attached to `request.state`.

    When the middleware is not installed, run the gate here instead so the
    dependencies keep working; the context is then cached on the request so
    the gate runs at most once per request.
    """
    context = getattr(request.state, AUTH_CONTEXT_ATTR, None)
    if isinstance(context, RequestContext):
        return context

    context = RequestContext(method=request.method, path=request.url.path)
    auth.authenticate_request(context, request.headers.get("Authorization"))
    setattr(request.state, AUTH_CONTEXT_ATTR, context)
    return context
