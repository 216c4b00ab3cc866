from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from elearn_auth.domain.constants import Role
from elearn_auth.domain.entities import Principal
from elearn_auth.integrations.fastapi import create_auth_router, create_fastapi_auth

ORIGIN = "https://e-learning-management.netlify.app"


@pytest.fixture
def fastapi_auth(settings, store):
    return create_fastapi_auth(settings, credential_store=store)


@pytest.fixture
def app(fastapi_auth):
    app = fastapi_auth.install(FastAPI())
    app.include_router(create_auth_router(fastapi_auth.auth))

    require_user = fastapi_auth.require_roles(Role.USER, Role.ADMIN)
    require_admin = fastapi_auth.require_roles(Role.ADMIN)
    decorators = fastapi_auth.decorators()

    @app.get("/courses")
    async def list_courses(principal=Depends(fastapi_auth.get_optional_principal)):
        return {"courses": [], "viewer": principal.subject if principal else None}

    @app.get("/courses/enrolled-courses")
    async def enrolled(principal: Principal = Depends(require_user)):
        return {"username": principal.subject}

    @app.delete("/courses/{course_id}")
    async def delete_course(course_id: int, principal: Principal = Depends(require_admin)):
        return {"deleted": course_id}

    @app.get("/me")
    async def me(context=Depends(fastapi_auth.get_request_context)):
        return {"authenticated": context.authenticated, "subject": context.subject}

    @app.get("/instructor-dashboard")
    @decorators.require_roles(Role.INSTRUCTOR)
    async def dashboard(request: Request, current_user: Principal):
        return {"instructor": current_user.subject}

    @app.get("/whoami")
    @decorators.authenticated
    def whoami(request: Request, current_user: Principal):
        return {"username": current_user.subject, "role": current_user.role.value}

    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def _login(client, username, password):
    response = client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_public_route_needs_no_header(client):
    response = client.get("/courses")
    assert response.status_code == 200
    assert response.json() == {"courses": [], "viewer": None}


def test_sub_resource_of_exact_public_route_is_private(client):
    response = client.get("/courses/enrolled-courses")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"
    assert response.headers["www-authenticate"] == "Bearer"


def test_login_and_call_private_route(client):
    token = _login(client, "alice", "alice-pass")

    response = client.get("/courses/enrolled-courses", headers=_auth(token))
    assert response.status_code == 200
    assert response.json() == {"username": "alice"}

    me = client.get("/me", headers=_auth(token)).json()
    assert me == {"authenticated": True, "subject": "alice"}


def test_wrong_role_is_forbidden(client):
    token = _login(client, "alice", "alice-pass")
    response = client.delete("/courses/3", headers=_auth(token))
    assert response.status_code == 403


def test_admin_passes_role_check(client):
    token = _login(client, "ada", "ada-pass")
    assert client.delete("/courses/3", headers=_auth(token)).json() == {"deleted": 3}


def test_expired_token_is_401_not_500(client, fastapi_auth):
    long_ago = datetime.now(timezone.utc) - timedelta(days=3)
    token = fastapi_auth.auth.issue("alice", Role.USER, now=long_ago).token

    response = client.get("/courses/enrolled-courses", headers=_auth(token))
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"

    # public routes do not care
    assert client.get("/courses", headers=_auth(token)).status_code == 200


def test_tampered_token_is_401(client):
    token = _login(client, "alice", "alice-pass")
    header, payload, signature = token.split(".")
    forged = ".".join([header, payload, signature[::-1]])

    response = client.get("/courses/enrolled-courses", headers=_auth(forged))
    assert response.status_code == 401


def test_login_does_not_enumerate_users(client):
    unknown = client.post("/auth/login", json={"username": "ghost", "password": "x"})
    wrong = client.post("/auth/login", json={"username": "alice", "password": "x"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"detail": "Incorrect username or password"}


def test_signup_then_login(client):
    response = client.post("/auth/signup", json={
        "name": "Bob",
        "email": "bob@example.com",
        "username": "bob",
        "password": "bob-pass",
    })
    assert response.status_code == 200
    assert response.json() == {"message": "User registered successfully"}

    token = _login(client, "bob", "bob-pass")
    assert client.get("/whoami", headers=_auth(token)).json() == {"username": "bob", "role": "USER"}


def test_signup_errors(client):
    base = {"name": "Eve", "email": "eve@example.com", "username": "eve", "password": "pw"}

    taken = client.post("/auth/signup", json={**base, "username": "alice"})
    assert taken.status_code == 409
    assert taken.json()["detail"] == "Username already registered"

    admin = client.post("/auth/signup", json={**base, "role": "ADMIN"})
    assert admin.status_code == 400

    bad_email = client.post("/auth/signup", json={**base, "email": "eve"})
    assert bad_email.status_code == 400


def test_availability_endpoints(client):
    assert client.get("/auth/check-username", params={"username": "alice"}).status_code == 409
    free = client.get("/auth/check-username", params={"username": "nobody"})
    assert free.status_code == 200
    assert free.json() == {"message": "Username is available"}

    assert client.get("/auth/check-email", params={"email": "ada@example.com"}).status_code == 409
    assert client.get("/auth/check-email", params={"email": "new@example.com"}).status_code == 200


def test_decorated_routes(client):
    student = _login(client, "alice", "alice-pass")
    instructor = _login(client, "ivan", "ivan-pass")

    assert client.get("/instructor-dashboard").status_code == 401
    assert client.get("/instructor-dashboard", headers=_auth(student)).status_code == 403

    response = client.get("/instructor-dashboard", headers=_auth(instructor))
    assert response.status_code == 200
    assert response.json() == {"instructor": "ivan"}

    assert client.get("/whoami").status_code == 401


def test_cors_preflight(client):
    response = client.options(
        "/courses/enrolled-courses",
        headers={"Origin": ORIGIN, "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == ORIGIN


def test_dependencies_work_without_middleware(fastapi_auth):
    app = FastAPI()
    app.include_router(create_auth_router(fastapi_auth.auth))

    @app.get("/profile")
    async def profile(principal: Principal = Depends(fastapi_auth.get_current_principal)):
        return {"username": principal.subject}

    client = TestClient(app)
    assert client.get("/profile").status_code == 401

    token = _login(client, "ivan", "ivan-pass")
    assert client.get("/profile", headers=_auth(token)).json() == {"username": "ivan"}


def test_empty_login_fields_are_401(client):
    for body in ({"username": "alice", "password": ""}, {"username": "", "password": "x"}):
        response = client.post("/auth/login", json=body)
        assert response.status_code == 401
        assert response.json() == {"detail": "Incorrect username or password"}


def _unguarded_app(fastapi_auth, **install_kwargs):
    app = fastapi_auth.install(FastAPI(), **install_kwargs)
    app.include_router(create_auth_router(fastapi_auth.auth))

    @app.get("/admin/users")
    async def list_users():
        return {"users": ["alice", "ivan", "ada"]}

    @app.get("/courses")
    async def list_courses():
        return {"courses": []}

    return TestClient(app)


def test_unguarded_private_route_is_open_by_default(fastapi_auth):
    client = _unguarded_app(fastapi_auth)
    assert client.get("/admin/users").status_code == 200


def test_deny_anonymous_closes_unguarded_private_routes(fastapi_auth):
    client = _unguarded_app(fastapi_auth, deny_anonymous=True)

    response = client.get("/admin/users")
    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated"}
    assert response.headers["www-authenticate"] == "Bearer"

    expired = fastapi_auth.auth.issue(
        "ada", Role.ADMIN, now=datetime.now(timezone.utc) - timedelta(days=3)
    ).token
    assert client.get("/admin/users", headers=_auth(expired)).status_code == 401

    token = _login(client, "ada", "ada-pass")
    assert client.get("/admin/users", headers=_auth(token)).status_code == 200

    # public routes and preflights still pass anonymously
    assert client.get("/courses").status_code == 200
    preflight = client.options(
        "/admin/users",
        headers={"Origin": ORIGIN, "Access-Control-Request-Method": "GET"},
    )
    assert preflight.status_code == 200


def test_deny_anonymous_from_settings(settings, store):
    settings.deny_anonymous = True
    client = _unguarded_app(create_fastapi_auth(settings, credential_store=store))
    assert client.get("/admin/users").status_code == 401
