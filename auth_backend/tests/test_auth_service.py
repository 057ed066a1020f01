from __future__ import annotations

from dataclasses import fields
from datetime import UTC, datetime, timedelta

import pytest

from auth_backend.application.services.auth_service import AuthService
from auth_backend.application.services.password_policy import PasswordPolicy
from auth_backend.application.services.token_issuer import JwtTokenIssuer
from auth_backend.domain.users.entities import User, UserProfile
from auth_backend.domain.users.exceptions import (
    InvalidCredentialsError,
    UnauthorizedAccessError,
    UsernameTakenError,
    WeakPasswordError,
)
from auth_backend.domain.users.repositories import PasswordHasher, UserRepository

SECRET = "service-test-secret-0123456789abcdef0123456789"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def find_by_username(self, username: str) -> User | None:
        return self._users.get(username)

    def find_by_id(self, user_id: str) -> User | None:
        for user in self._users.values():
            if user.id == user_id:
                return user
        return None

    def add(self, user: User) -> User:
        if user.username in self._users:
            raise UsernameTakenError()
        self._users[user.username] = user
        return user


class BlindPrecheckRepository(InMemoryUserRepository):
    """Lookup never sees the row, as when a concurrent insert has not committed yet."""

    def find_by_username(self, username: str) -> User | None:
        return None


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.hash_calls = 0
        self.verify_calls: list[tuple[str, str]] = []

    def hash(self, password: str) -> str:
        self.hash_calls += 1
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verify_calls.append((password, hashed))
        return hashed == f"hashed:{password}"


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def service(users: InMemoryUserRepository, hasher: DeterministicHasher) -> AuthService:
    return AuthService(
        users=users,
        password_hasher=hasher,
        tokens=JwtTokenIssuer(SECRET),
    )


def test_register_returns_profile_without_hash(
    service: AuthService, users: InMemoryUserRepository
) -> None:
    profile = service.register("alice", "Secret99x", email="alice@example.com")

    assert isinstance(profile, UserProfile)
    assert profile.username == "alice"
    assert profile.email == "alice@example.com"
    assert "password_hash" not in {f.name for f in fields(profile)}
    assert "password_hash" not in profile.to_dict()
    assert users.find_by_username("alice").password_hash == "hashed:Secret99x"


def test_register_assigns_unique_ids(service: AuthService) -> None:
    first = service.register("alice", "Secret99x")
    second = service.register("bob", "Secret99x")

    assert first.id and second.id
    assert first.id != second.id


def test_register_weak_password_creates_nothing(
    service: AuthService, users: InMemoryUserRepository
) -> None:
    with pytest.raises(WeakPasswordError) as exc_info:
        service.register("new_user", "weak")

    assert exc_info.value.code == "weak_password"
    assert users.find_by_username("new_user") is None


def test_register_taken_username_keeps_existing_record(
    service: AuthService, users: InMemoryUserRepository
) -> None:
    original = service.register("john_doe", "Password123")

    with pytest.raises(UsernameTakenError):
        service.register("john_doe", "Different456")

    stored = users.find_by_username("john_doe")
    assert stored.id == original.id
    assert stored.password_hash == "hashed:Password123"


def test_register_relies_on_store_uniqueness(hasher: DeterministicHasher) -> None:
    users = BlindPrecheckRepository()
    service = AuthService(users=users, password_hasher=hasher, tokens=JwtTokenIssuer(SECRET))
    service.register("alice", "Secret99x")

    with pytest.raises(UsernameTakenError):
        service.register("alice", "Secret99x")


def test_register_uses_configured_policy(users: InMemoryUserRepository) -> None:
    service = AuthService(
        users=users,
        password_hasher=DeterministicHasher(),
        tokens=JwtTokenIssuer(SECRET),
        password_policy=PasswordPolicy(min_length=12),
    )

    with pytest.raises(WeakPasswordError):
        service.register("alice", "Secret99x")


def test_validate_credentials_success(service: AuthService) -> None:
    service.register("john_doe", "Password123")

    user = service.validate_credentials("john_doe", "Password123")

    assert user is not None
    assert user.username == "john_doe"


def test_validate_credentials_wrong_password(service: AuthService) -> None:
    service.register("john_doe", "Password123")

    assert service.validate_credentials("john_doe", "incorrect_password") is None


def test_validate_credentials_unknown_user(service: AuthService) -> None:
    assert service.validate_credentials("nonexistent_user", "Password123") is None


def test_validate_credentials_empty(service: AuthService) -> None:
    service.register("john_doe", "Password123")

    assert service.validate_credentials("", "") is None


def test_unknown_user_still_verifies_a_hash(
    service: AuthService, hasher: DeterministicHasher
) -> None:
    service.validate_credentials("ghost", "Password123")
    service.validate_credentials("", "")

    assert len(hasher.verify_calls) == 2
    assert all(hashed.startswith("hashed:") for _, hashed in hasher.verify_calls)


def test_dummy_hash_prepared_at_construction(hasher: DeterministicHasher) -> None:
    service = AuthService(
        users=InMemoryUserRepository(), password_hasher=hasher, tokens=JwtTokenIssuer(SECRET)
    )
    assert hasher.hash_calls == 1

    service.validate_credentials("ghost", "Password123")
    service.validate_credentials("phantom", "Password123")

    assert hasher.hash_calls == 1
    assert len(hasher.verify_calls) == 2


def test_validate_by_id(service: AuthService) -> None:
    profile = service.register("john_doe", "Password123")

    assert service.validate_by_id(profile.id).username == "john_doe"
    assert service.validate_by_id("missing") is None


def test_login_issues_token_for_subject(service: AuthService) -> None:
    service.register("john_doe", "Password123")
    user = service.validate_credentials("john_doe", "Password123")

    token = service.login(user)

    payload = JwtTokenIssuer(SECRET).verify(token)
    assert payload.subject == user.id
    assert payload.username == "john_doe"


def test_authenticate_collapses_failures(service: AuthService) -> None:
    service.register("john_doe", "Password123")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        service.authenticate("john_doe", "nope")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        service.authenticate("nobody", "Password123")

    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()


def test_resolve_principal_round_trip(service: AuthService) -> None:
    service.register("john_doe", "Password123")
    token = service.authenticate("john_doe", "Password123")

    assert service.resolve_principal(token).username == "john_doe"


@pytest.mark.parametrize("token", [None, "", "garbage", "\ud800.a.b"])
def test_resolve_principal_rejects_bad_tokens(service: AuthService, token: str | None) -> None:
    with pytest.raises(UnauthorizedAccessError):
        service.resolve_principal(token)


def test_resolve_principal_rejects_expired_token(
    users: InMemoryUserRepository, hasher: DeterministicHasher
) -> None:
    past = datetime.now(UTC) - timedelta(days=2)
    stale_service = AuthService(
        users=users, password_hasher=hasher, tokens=JwtTokenIssuer(SECRET, clock=lambda: past)
    )
    stale_service.register("john_doe", "Password123")
    token = stale_service.authenticate("john_doe", "Password123")

    fresh_service = AuthService(users=users, password_hasher=hasher, tokens=JwtTokenIssuer(SECRET))
    with pytest.raises(UnauthorizedAccessError) as exc_info:
        fresh_service.resolve_principal(token)

    assert exc_info.value.code == "unauthorized"


def test_resolve_principal_rejects_vanished_subject(hasher: DeterministicHasher) -> None:
    issuer = JwtTokenIssuer(SECRET)
    ghost = User(
        id="deadbeef", username="ghost", password_hash="x", created_at=datetime.now(UTC)
    )
    service = AuthService(users=InMemoryUserRepository(), password_hasher=hasher, tokens=issuer)

    with pytest.raises(UnauthorizedAccessError):
        service.resolve_principal(issuer.issue(ghost))
