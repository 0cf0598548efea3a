from __future__ import annotations

import logging

from flask import Flask, request, session

from ..common.access import end_session, login_required, start_session
from ..common.responses import json_error, json_ok
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        try:
            user = container.auth_service.authenticate_payload(request.get_json(silent=True))
        except ValidationError:
            return json_error("missing fields", "Email, password, and role are required", 400)
        except AuthenticationError:
            return json_error("invalid credentials", "Invalid credentials or role", 401)
        except Exception:
            logger.exception("Login failed with a system error")
            return json_error("store error", "Database error", 500)

        start_session(user)
        return json_ok(user=user.to_public())

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        try:
            user = container.auth_service.current_user(session["user_id"])
        except AuthenticationError:
            # Account vanished since login.
            end_session()
            return json_error("unauthorized", "Please log in to continue", 401)
        except Exception:
            logger.exception("Loading the current user failed")
            return json_error("store error", "Database error", 500)
        return json_ok(user=user.to_public())

    @app.route("/logout", methods=["POST"], endpoint="logout")
    @login_required
    def logout():
        end_session()
        return json_ok(message="Logged out")
