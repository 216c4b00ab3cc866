import pytest

from elearn_auth.application.use_cases.register import (
    CheckAvailabilityUseCase,
    RegisterUserUseCase,
    SignupRequest,
)
from elearn_auth.domain.constants import Role
from elearn_auth.domain.exceptions import (
    EmailTakenError,
    RegistrationConflictError,
    RegistrationError,
    UsernameTakenError,
)


@pytest.fixture
def register(store, hasher):
    return RegisterUserUseCase(registry=store, password_hasher=hasher)


def _request(**overrides):
    data = dict(name="Bob", email="bob@example.com", username="bob", password="bob-pass")
    data.update(overrides)
    return SignupRequest(**data)


def test_register_stores_hashed_user(register, store, hasher):
    account = register.execute(_request())

    assert account.role is Role.USER
    assert account.password_hash != "bob-pass"
    assert hasher.verify("bob-pass", account.password_hash)

    credential = store.find_by_username("bob")
    assert credential.role is Role.USER
    assert store.email_exists("BOB@example.com")


def test_explicit_user_role_is_accepted(register):
    assert register.execute(_request(role="USER")).role is Role.USER


@pytest.mark.parametrize("role", ["ADMIN", "INSTRUCTOR", "ROOT"])
def test_other_roles_are_refused(register, store, role):
    with pytest.raises(RegistrationError):
        register.execute(_request(role=role))
    assert not store.username_exists("bob")


def test_username_taken(register):
    with pytest.raises(UsernameTakenError) as exc:
        register.execute(_request(username="alice"))
    assert isinstance(exc.value, RegistrationConflictError)
    assert str(exc.value) == "Username already registered"


def test_email_taken(register):
    with pytest.raises(EmailTakenError) as exc:
        register.execute(_request(email="alice@example.com"))
    assert str(exc.value) == "Email already registered"


@pytest.mark.parametrize(
    "field,message",
    [
        ("name", "Name cannot be empty"),
        ("username", "Username cannot be empty"),
        ("password", "Password cannot be empty"),
        ("email", "Email cannot be empty"),
    ],
)
def test_blank_fields_are_rejected(register, field, message):
    with pytest.raises(RegistrationError, match=message):
        register.execute(_request(**{field: "   "}))


def test_invalid_email_is_rejected(register):
    with pytest.raises(RegistrationError, match="Invalid email format"):
        register.execute(_request(email="bob-at-example.com"))


def test_availability(store):
    check = CheckAvailabilityUseCase(registry=store)

    assert not check.username_available("alice")
    assert check.username_available("nobody")
    assert not check.email_available("alice@example.com")
    assert check.email_available("nobody@example.com")
