from __future__ import annotations

from typing import Optional

from flask import Flask, make_response, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.serialization import to_jsonable
from ..common.web import SESSION_KEY, current_actor, login_required, manager_required, ok, parse_branch, parse_enum, payload
from ..container import Container
from ..core.enums import BranchCode, EmployeeRank
from ..core.exceptions import ValidationError
from .model import Employee, EmployeePatch, WageConfig
from .service import MANAGER_SESSION, SessionUser
from . import preferences


def employee_json(employee: Employee, *, include_private: bool) -> dict:
    data = to_jsonable(employee)
    data["hourly_wage"] = employee.wage.hourly_wage
    if not include_private:
        for key in ("pin", "bank_name", "account_number", "wage"):
            data.pop(key, None)
        data.pop("hourly_wage", None)
    return data


def _wage_from(data) -> Optional[WageConfig]:
    if not isinstance(data, dict):
        return None
    try:
        return WageConfig(
            basic=int(data.get("basic", 0)),
            responsibility=int(data.get("responsibility", 0)),
            incentive=int(data.get("incentive", 0)),
            special=int(data.get("special", 0)),
        )
    except (TypeError, ValueError):
        raise ValidationError("Wage values must be numbers")


def _required_branch(value) -> BranchCode:
    branch = parse_branch(value)
    if branch is None:
        raise ValidationError("Branch is required")
    return branch


def _truthy(value) -> bool:
    return str(value).lower() in {"1", "true", "yes", "on"}


def register(app: Flask, container: Container) -> None:
    days = container.remember_cookie_days

    def _login_response(user: SessionUser, *, remember: bool):
        session.clear()
        session[SESSION_KEY] = user.to_session()
        resp = make_response(ok(user.to_session()))
        if remember and user.is_manager:
            preferences.remember_manager(resp, days=days)
        elif remember:
            preferences.remember_user(resp, user.user_id, days=days)
        return resp

    @app.route("/api/auth/login", methods=["POST"], endpoint="crew_login")
    def crew_login():
        data = payload()
        user = container.auth_service.login_crew(data.get("phone_suffix", ""), data.get("pin", ""))
        return _login_response(user, remember=_truthy(data.get("remember")))

    @app.route("/api/auth/manager-login", methods=["POST"], endpoint="manager_login")
    def manager_login():
        data = payload()
        user = container.auth_service.login_manager(data.get("password", ""))
        return _login_response(user, remember=_truthy(data.get("remember")))

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        resp = make_response(ok())
        preferences.clear_all(resp)
        return resp

    @app.route("/api/auth/session", methods=["GET"], endpoint="session_info")
    def session_info():
        """Current user; a remembered cookie logs the user back in."""

        user = None
        if session.get(SESSION_KEY):
            user = current_actor()
        elif preferences.remembers_manager(request):
            user = MANAGER_SESSION
        else:
            remembered = preferences.remembered_user_id(request)
            if remembered:
                user = container.auth_service.restore_crew(remembered)

        if user:
            session[SESSION_KEY] = user.to_session()
        return ok(user.to_session() if user else None, theme=preferences.theme(request))

    @app.route("/api/preferences/theme", methods=["PUT", "DELETE"], endpoint="theme_preference")
    def theme_preference():
        if request.method == "DELETE":
            resp = make_response(ok())
            preferences.clear_theme(resp)
            return resp

        value = str(payload().get("theme", "")).lower()
        resp = make_response(ok({"theme": value}))
        preferences.set_theme(resp, value, days=days)
        return resp

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @login_required
    def employees_list():
        actor = current_actor()
        rows = container.employee_service.list_view(
            actor=actor,
            resigned=request.args.get("tab") == "resigned",
            branch=parse_branch(request.args.get("branch")),
            search=request.args.get("q", ""),
        )
        return ok([employee_json(e, include_private=actor.is_manager) for e in rows])

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="employees_get")
    @login_required
    def employees_get(employee_id: str):
        actor = current_actor()
        employee = container.employee_service.get(employee_id)
        return ok(employee_json(employee, include_private=actor.is_manager or actor.user_id == employee_id))

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @manager_required
    def employees_create():
        data = payload()
        join_date = data.get("join_date")
        employee = container.employee_service.create(
            actor=current_actor(),
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            pin=data.get("pin", ""),
            branch=_required_branch(data.get("branch")),
            rank=parse_enum(EmployeeRank, data.get("rank"), "rank", EmployeeRank.CREW),
            wage=_wage_from(data.get("wage")),
            join_date=parse_iso_date(join_date) if join_date else None,
            bank_name=data.get("bank_name"),
            account_number=data.get("account_number"),
        )
        return ok(employee_json(employee, include_private=True), status=201)

    @app.route("/api/employees/<employee_id>", methods=["PATCH"], endpoint="employees_update")
    @manager_required
    def employees_update(employee_id: str):
        data = payload()
        join_date = data.get("join_date")
        patch = EmployeePatch(
            name=data.get("name"),
            phone=data.get("phone"),
            pin=data.get("pin"),
            branch=parse_branch(data.get("branch")),
            rank=parse_enum(EmployeeRank, data.get("rank"), "rank"),
            wage=_wage_from(data.get("wage")),
            join_date=parse_iso_date(join_date) if join_date else None,
            bank_name=data.get("bank_name"),
            account_number=data.get("account_number"),
        )
        employee = container.employee_service.update(actor=current_actor(), employee_id=employee_id, patch=patch)
        return ok(employee_json(employee, include_private=True))

    @app.route("/api/employees/<employee_id>/resign", methods=["POST"], endpoint="employees_resign")
    @manager_required
    def employees_resign(employee_id: str):
        employee = container.employee_service.resign(actor=current_actor(), employee_id=employee_id)
        return ok(employee_json(employee, include_private=True))

    @app.route("/api/employees/<employee_id>/restore", methods=["POST"], endpoint="employees_restore")
    @manager_required
    def employees_restore(employee_id: str):
        employee = container.employee_service.restore(actor=current_actor(), employee_id=employee_id)
        return ok(employee_json(employee, include_private=True))
