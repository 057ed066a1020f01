# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from auth_backend.domain.users.entities import User as DomainUser
from auth_backend.domain.users.exceptions import UsernameTakenError
from auth_backend.domain.users.repositories import UserRepository
from auth_backend.infrastructure.db.models import User
from auth_backend.infrastructure.db.session import session_scope
from auth_backend.shared.logging import logger


def _to_domain(row: User) -> DomainUser:
    created_at = row.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=created_at,
        email=row.email,
        full_name=row.full_name,
    )


class SqlAlchemyUserRepository(UserRepository):
    def find_by_username(self, username: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            if not row:
                return None
            return _to_domain(row)

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.get(User, user_id)
            if not row:
                return None
            return _to_domain(row)

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with session_scope() as session:
                row = User(
                    id=user.id,
                    username=user.username,
                    password_hash=user.password_hash,
                    email=user.email,
                    full_name=user.full_name,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            logger.info(f"users.add: unique constraint rejected username={user.username}")
            raise UsernameTakenError() from exc
