# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Command line entry point: ``python -m auth_backend <command>``."""

from __future__ import annotations

import argparse
import getpass
import sys

from auth_backend.domain.users.exceptions import UsernameTakenError, WeakPasswordError


def _create_user(args: argparse.Namespace) -> int:
    from auth_backend.infrastructure.container import Container
    from auth_backend.infrastructure.db import init_db
    from auth_backend.shared.logging import setup_logging

    setup_logging()
    init_db()

    password = args.password
    if password is None:
        password = getpass.getpass("Password: ")
        if password != getpass.getpass("Repeat password: "):
            print("Passwords do not match", file=sys.stderr)
            return 1

    container = Container()
    service = container.auth_service
    try:
        profile = service.register(
            args.username, password, email=args.email, full_name=args.full_name
        )
    except WeakPasswordError:
        print(container.password_policy.describe(), file=sys.stderr)
        return 1
    except UsernameTakenError:
        print(f"Username '{args.username}' is already taken", file=sys.stderr)
        return 1

    print(f"Created user {profile.username} (id={profile.id})")
    return 0


def _serve(args: argparse.Namespace) -> int:
    from auth_backend.app import create_app

    app = create_app()
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="auth_backend", description="Authentication backend")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-user", help="Register a user account")
    create.add_argument("username")
    create.add_argument("--password", default=None, help="Omit to be prompted")
    create.add_argument("--email", default=None)
    create.add_argument("--full-name", dest="full_name", default=None)
    create.set_defaults(func=_create_user)

    serve = sub.add_parser("serve", help="Run the development server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)
    serve.add_argument("--debug", action="store_true")
    serve.set_defaults(func=_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
