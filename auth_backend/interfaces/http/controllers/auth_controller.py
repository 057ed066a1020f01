# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from auth_backend.application.services.auth_service import AuthService
from auth_backend.interfaces.http.dto.auth import (AccessTokenDTO, LoginRequestDTO,
                                                   RegisterRequestDTO)
from auth_backend.interfaces.http.guards import JwtAuthGuard, current_user
from auth_backend.shared.errors.validation import raise_validation_error


class AuthController:
    def __init__(self, *, auth_service: AuthService, guard: JwtAuthGuard) -> None:
        self._auth_service = auth_service
        self._guard = guard

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        profile = self._auth_service.register(
            dto.username,
            dto.password,
            email=dto.email,
            full_name=dto.full_name,
        )
        return jsonify(profile.to_dict()), HTTPStatus.CREATED

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        token = self._auth_service.authenticate(dto.username, dto.password)
        payload = AccessTokenDTO(access_token=token).model_dump(by_alias=True)
        return jsonify(payload), HTTPStatus.OK

    def logged_user(self) -> tuple[Response, int]:
        return jsonify(current_user().to_profile().to_dict()), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/logged_user", view_func=self._guard.require(self.logged_user), methods=["GET"]
        )
        return bp
