from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from ...application.use_cases.register import SignupRequest
from ...domain.exceptions import (
    InvalidCredentialsError,
    RegistrationConflictError,
    RegistrationError,
)
from ..common.auth_factory import AuthDependencies


class LoginBody(BaseModel):
    # blanks reach the login use case and fail there with a 401
    username: str
    password: str


class TokenResponse(BaseModel):
    token: str


class SignupBody(BaseModel):
    name: str
    email: str
    username: str
    password: str
    role: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


def create_auth_router(auth: AuthDependencies, prefix: str = "/auth") -> APIRouter:
    """
    Build the public authentication endpoints:

        POST {prefix}/login           -> {"token": ...} | 401
        POST {prefix}/signup          -> {"message": ...} | 400 | 409
        GET  {prefix}/check-username  -> 200 available | 409 taken
        GET  {prefix}/check-email     -> 200 available | 409 taken

    These paths must be covered by the public route rules.
    """
    router = APIRouter(prefix=prefix, tags=["auth"])

    @router.post("/login", response_model=TokenResponse)
    def login(body: LoginBody) -> TokenResponse:
        try:
            issued = auth.login(body.username, body.password)
        except InvalidCredentialsError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
                headers={"WWW-Authenticate": "Bearer"},
            ) from exc
        return TokenResponse(token=issued.token)

    @router.post("/signup", response_model=MessageResponse)
    def signup(body: SignupBody) -> MessageResponse:
        try:
            auth.register(SignupRequest(**body.model_dump()))
        except RegistrationConflictError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
        except RegistrationError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return MessageResponse(message="User registered successfully")

    @router.get("/check-username", response_model=MessageResponse)
    def check_username(username: str = Query(min_length=1)) -> MessageResponse:
        if not auth.username_available(username):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                                detail="Username already registered")
        return MessageResponse(message="Username is available")

    @router.get("/check-email", response_model=MessageResponse)
    def check_email(email: str = Query(min_length=1)) -> MessageResponse:
        if not auth.email_available(email):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                                detail="Email already registered")
        return MessageResponse(message="Email is available")

    return router
