"""Shared helpers for the JSON controllers: session actor, guards, error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional, Type, TypeVar

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import BranchCode
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ClockInBlockedError,
    DomainError,
    ExternalServiceError,
    InvalidTransitionError,
    LateConfirmationRequired,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from ..employees.service import SessionUser
from .serialization import to_jsonable

logger = logging.getLogger(__name__)

E = TypeVar("E")

SESSION_KEY = "user"

_STATUS_CODES = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (InvalidTransitionError, 409),
    (ExternalServiceError, 502),
    (PersistenceError, 500),
    (ValidationError, 400),
)


def current_actor() -> SessionUser:
    data = session.get(SESSION_KEY)
    if not data:
        raise AuthenticationError("Please log in")
    return SessionUser.from_session(data)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_actor()
        return view(*args, **kwargs)

    return wrapper


def manager_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_actor().is_manager:
            raise AuthorizationError("Manager only")
        return view(*args, **kwargs)

    return wrapper


def ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True, "data": to_jsonable(data)}
    body.update({k: to_jsonable(v) for k, v in extra.items()})
    return jsonify(body), status


def payload() -> dict:
    """JSON body, falling back to form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def parse_enum(enum_cls: Type[E], value: Optional[str], field_name: str, default: Optional[E] = None) -> Optional[E]:
    if value in (None, ""):
        return default
    try:
        return enum_cls(value)
    except ValueError:
        try:
            return enum_cls[str(value).upper()]
        except KeyError:
            raise ValidationError(f"Invalid {field_name}: {value}")


def parse_branch(value: Optional[str]) -> Optional[BranchCode]:
    if value in (None, "", "ALL"):
        return None
    return parse_enum(BranchCode, value, "branch")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in _STATUS_CODES if isinstance(e, cls)), 400)
        body = {"success": False, "message": str(e)}
        if isinstance(e, ClockInBlockedError):
            body["reason"] = e.reason.value
        if isinstance(e, LateConfirmationRequired):
            body["requires_confirmation"] = True
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, e)
        return jsonify(body), status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": "Internal server error"}), 500
