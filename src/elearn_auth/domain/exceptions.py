class AuthenticationError(Exception):
    """Raised when authentication fails."""
    pass


class AuthorizationError(Exception):
    """Raised when the principal's role is not allowed."""
    pass


class TokenExpiredError(AuthenticationError):
    """Raised when token has expired."""
    pass


class InvalidTokenError(AuthenticationError):
    """Raised when token is malformed, tampered with or carries bad claims."""
    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised on login failure, whatever the underlying cause."""

    def __init__(self, message: str = "Incorrect username or password") -> None:
        super().__init__(message)


class InvalidRoleError(ValueError):
    """Raised when a role name is outside the closed role set."""
    pass


class ConfigurationError(Exception):
    """Raised at startup when settings cannot be used."""
    pass


class ClassifierMisconfigurationError(ConfigurationError):
    """Raised when the public route rules conflict."""
    pass


class RegistrationError(ValueError):
    """Raised when a signup request is rejected."""
    pass


class RegistrationConflictError(RegistrationError):
    """Raised when a signup collides with an existing account."""
    pass


class UsernameTakenError(RegistrationConflictError):
    def __init__(self, message: str = "Username already registered") -> None:
        super().__init__(message)


class EmailTakenError(RegistrationConflictError):
    def __init__(self, message: str = "Email already registered") -> None:
        super().__init__(message)
