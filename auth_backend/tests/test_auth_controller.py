from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from flask import Flask
from flask.testing import FlaskClient

from auth_backend.application.services.auth_service import AuthService
from auth_backend.application.services.token_issuer import JwtTokenIssuer
from auth_backend.domain.users.entities import User
from auth_backend.domain.users.exceptions import UsernameTakenError
from auth_backend.interfaces.http.controllers.auth_controller import AuthController
from auth_backend.interfaces.http.guards import JwtAuthGuard
from auth_backend.shared.middleware.error_handler import configure_error_handling

SECRET = "controller-test-secret-0123456789abcdef0123456789"


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def find_by_username(self, username: str) -> User | None:
        return self._users.get(username)

    def find_by_id(self, user_id: str) -> User | None:
        return next((u for u in self._users.values() if u.id == user_id), None)

    def add(self, user: User) -> User:
        if user.username in self._users:
            raise UsernameTakenError()
        self._users[user.username] = user
        return user


class DeterministicHasher:
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


@pytest.fixture()
def auth_service() -> AuthService:
    return AuthService(
        users=InMemoryUserRepository(),
        password_hasher=DeterministicHasher(),
        tokens=JwtTokenIssuer(SECRET),
    )


@pytest.fixture()
def flask_app(auth_service: AuthService) -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    controller = AuthController(
        auth_service=auth_service,
        guard=JwtAuthGuard(auth_service=auth_service),
    )
    app.register_blueprint(controller.as_blueprint())
    return app


@pytest.fixture()
def client(flask_app: Flask) -> FlaskClient:
    return flask_app.test_client()


def _register(client: FlaskClient, username: str = "alice", password: str = "Secret99x"):
    return client.post("/api/auth/register", json={"username": username, "password": password})


def test_register_returns_created_profile(client: FlaskClient) -> None:
    response = client.post(
        "/api/auth/register",
        json={
            "username": "alice",
            "password": "Secret99x",
            "email": "alice@example.com",
            "full_name": "Alice Liddell",
        },
    )

    assert response.status_code == 201
    body = response.get_json()
    assert body["username"] == "alice"
    assert body["email"] == "alice@example.com"
    assert body["full_name"] == "Alice Liddell"
    assert body["id"]
    assert "password" not in body
    assert "password_hash" not in body


def test_register_weak_password_returns_400(client: FlaskClient) -> None:
    response = _register(client, password="weak")

    assert response.status_code == 400
    assert response.get_json()["error"] == "weak_password"


def test_register_taken_username_returns_409(client: FlaskClient) -> None:
    assert _register(client).status_code == 201

    response = _register(client, password="Another123")

    assert response.status_code == 409
    assert response.get_json()["error"] == "username_taken"


@pytest.mark.parametrize(
    "body",
    [
        {"username": "alice"},
        {"password": "Secret99x"},
        {"username": "", "password": "Secret99x"},
        {"username": "al ice", "password": "Secret99x"},
        {"username": "alice\n", "password": "Secret99x"},
        {"username": "alice", "password": "Secret99x", "email": "not-an-email"},
    ],
)
def test_register_invalid_body_returns_422(client: FlaskClient, body: dict) -> None:
    response = client.post("/api/auth/register", json=body)

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "Secret99x" not in response.get_data(as_text=True)


def test_register_non_json_body_returns_422(client: FlaskClient) -> None:
    response = client.post("/api/auth/register", data="username=alice", content_type="text/plain")

    assert response.status_code == 422


def test_login_returns_access_token(client: FlaskClient) -> None:
    _register(client)

    response = client.post("/api/auth/login", json={"username": "alice", "password": "Secret99x"})

    assert response.status_code == 200
    body = response.get_json()
    assert set(body) == {"accessToken"}
    assert JwtTokenIssuer(SECRET).verify(body["accessToken"]).username == "alice"


@pytest.mark.parametrize(
    "credentials",
    [
        {"username": "alice", "password": "Secret99y"},
        {"username": "nobody", "password": "Secret99x"},
        {"username": "", "password": ""},
    ],
)
def test_login_rejects_bad_credentials(client: FlaskClient, credentials: dict) -> None:
    _register(client)

    response = client.post("/api/auth/login", json=credentials)

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}


def test_login_invalid_payload_returns_422(client: FlaskClient) -> None:
    response = client.post("/api/auth/login", json={"username": "a"})

    assert response.status_code == 422
    assert response.get_json()["error"] == "validation_error"


def test_logged_user_requires_token(client: FlaskClient) -> None:
    response = client.get("/api/auth/logged_user")

    assert response.status_code == 401
    assert response.get_json() == {"error": "unauthorized"}
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.parametrize("header", ["Bearer garbage", "Basic abc", "Bearer "])
def test_logged_user_rejects_bad_authorization(client: FlaskClient, header: str) -> None:
    response = client.get("/api/auth/logged_user", headers={"Authorization": header})

    assert response.status_code == 401
    assert response.get_json() == {"error": "unauthorized"}


def test_logged_user_rejects_expired_token(client: FlaskClient) -> None:
    profile = _register(client).get_json()
    past = datetime.now(UTC) - timedelta(days=2)
    stale = JwtTokenIssuer(SECRET, clock=lambda: past).issue(
        User(
            id=profile["id"],
            username="alice",
            password_hash="unused",
            created_at=datetime.now(UTC),
        )
    )

    response = client.get("/api/auth/logged_user", headers={"Authorization": f"Bearer {stale}"})

    assert response.status_code == 401
    assert response.get_json() == {"error": "unauthorized"}


def test_logged_user_returns_profile(client: FlaskClient) -> None:
    registered = _register(client).get_json()
    token = client.post(
        "/api/auth/login", json={"username": "alice", "password": "Secret99x"}
    ).get_json()["accessToken"]

    response = client.get("/api/auth/logged_user", headers={"Authorization": f"bearer {token}"})

    assert response.status_code == 200
    body = response.get_json()
    assert body["id"] == registered["id"]
    assert body["username"] == "alice"
    assert "password_hash" not in body
