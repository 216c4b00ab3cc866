from __future__ import annotations

import inspect
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional, ParamSpec, TypeVar

from fastapi import HTTPException, status
from starlette.requests import Request

from ...domain.constants import Role
from ...domain.entities import Principal
from ...domain.exceptions import AuthenticationError, AuthorizationError
from ...domain.value_objects import RoleRequirement
from ..common.auth_factory import AuthDependencies
from .security import get_or_create_context

P = ParamSpec("P")
R = TypeVar("R")

INJECTED_PARAM = "current_user"


@dataclass(slots=True)
class FastAPIDecorators:
    """
    Decorator-based auth helpers for FastAPI route handlers.

    Built on top of the framework-agnostic `AuthDependencies` facade, reading
    the RequestContext the gate produced for the request.

    Usage example in your FastAPI app:

        auth_decorators = fastapi_auth.decorators()

        @router.get("/courses/enrolled-courses")
        @auth_decorators.require_roles(Role.USER, Role.ADMIN)
        async def enrolled(request: Request, current_user: Principal):
            return {"username": current_user.subject}

    All decorators will:
      - Read (or compute) the request's principal
      - Optionally authorize it against roles
      - Inject `current_user` (Principal) into kwargs
      - Translate domain errors into HTTPException

    The route must take a `request: Request` parameter. `current_user` is
    hidden from FastAPI's view of the signature.
    """

    auth: AuthDependencies

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _extract_request(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Request:
        """Extract Request object from function arguments."""
        if "request" in kwargs and isinstance(kwargs["request"], Request):
            return kwargs["request"]

        for arg in args:
            if isinstance(arg, Request):
                return arg

        raise ValueError(
            "Request object not found. "
            "Ensure your route has a 'request: Request' parameter."
        )

    def _principal_for(
            self,
            args: tuple[Any, ...],
            kwargs: dict[str, Any],
            requirement: Optional[RoleRequirement],
    ) -> Principal:
        request = self._extract_request(args, kwargs)
        context = get_or_create_context(request, self.auth)
        try:
            return self.auth.authorize(
                context.principal,
                [requirement] if requirement is not None else [],
            )
        except AuthenticationError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
                headers={"WWW-Authenticate": "Bearer"},
            ) from exc
        except AuthorizationError as exc:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=str(exc),
            ) from exc

    @staticmethod
    def _public_signature(func: Callable[..., Any]) -> inspect.Signature:
        signature = inspect.signature(func, eval_str=True)
        params = [p for name, p in signature.parameters.items() if name != INJECTED_PARAM]
        return signature.replace(parameters=params)

    def _wrap(
            self,
            func: Callable[P, R],
            requirement: Optional[RoleRequirement],
    ) -> Callable[P, Any]:

        @wraps(func)
        async def async_impl(*args: P.args, **kwargs: P.kwargs) -> Any:
            kwargs[INJECTED_PARAM] = self._principal_for(args, kwargs, requirement)
            return await func(*args, **kwargs)  # type: ignore[misc]

        @wraps(func)
        def sync_impl(*args: P.args, **kwargs: P.kwargs) -> Any:
            kwargs[INJECTED_PARAM] = self._principal_for(args, kwargs, requirement)
            return func(*args, **kwargs)

        wrapper = async_impl if inspect.iscoroutinefunction(func) else sync_impl
        wrapper.__signature__ = self._public_signature(func)  # type: ignore[attr-defined]
        return wrapper

    # ------------------------------------------------------------------ #
    # decorators
    # ------------------------------------------------------------------ #

    def authenticated(self, func: Callable[P, R]) -> Callable[P, Any]:
        """
        Decorator: require authentication.

        Injects `current_user: Principal` into kwargs.
        """
        return self._wrap(func, None)

    def require_roles(self, *roles: Role | str):
        """
        Decorator: require any of the given roles.

        Also injects `current_user` into kwargs.
        """
        requirement = self.auth.require_roles(any_of=roles)

        def decorator(func: Callable[P, R]) -> Callable[P, Any]:
            return self._wrap(func, requirement)

        return decorator
