from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Optional

from flask import current_app, request, session

from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..employees.service import SessionEmployee
from .datetime_utils import parse_iso_date

SESSION_KEY = "employee"


def current_employee() -> Optional[SessionEmployee]:
    return SessionEmployee.from_session(session.get(SESSION_KEY))


def _auth_enforced() -> bool:
    return bool(current_app.config.get("ADMIN_AUTH_REQUIRED", False))


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if _auth_enforced():
            who = current_employee()
            if who is None:
                raise AuthenticationError("Login required")
            if not who.is_admin:
                raise AuthorizationError("Admin access required")
        return view(*args, **kwargs)

    return wrapper


def self_or_admin_required(view):
    """Employees may act on their own PIN only; admins on any."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if _auth_enforced():
            who = current_employee()
            if who is None:
                raise AuthenticationError("Login required")
            if not who.is_admin and who.employee_id != str(kwargs.get("employee_id")):
                raise AuthorizationError("You can only act on your own record")
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_date(name: str) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return None
    return parse_iso_date(value)
