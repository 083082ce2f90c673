from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import SESSION_KEY, admin_required, current_employee, json_body
from ..container import Container
from ..core.exceptions import AuthenticationError
from .model import Employee


def employee_to_json(e: Employee) -> dict:
    return {
        "employeeId": e.employee_id,
        "name": e.name,
        "hourlyWage": float(e.hourly_wage),
        "role": e.role.value,
        "active": e.active,
        "createdAt": e.created_at.isoformat() if e.created_at else None,
    }


def register(app: Flask, container: Container) -> None:
    directory = container.directory

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        who = container.auth_service.login(data.get("pin"))
        session.clear()
        session[SESSION_KEY] = who.to_session()
        employee = directory.get(who.employee_id)
        return jsonify({**employee_to_json(employee), "isAdmin": who.is_admin})

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    def me():
        who = current_employee()
        if who is None:
            raise AuthenticationError("Login required")
        employee = directory.get(who.employee_id)
        return jsonify({**employee_to_json(employee), "isAdmin": who.is_admin})

    @app.route("/api/employee/<pin>", methods=["GET"], endpoint="api_employee_get")
    def get_employee(pin: str):
        return jsonify(employee_to_json(directory.get(pin)))

    @app.route("/api/employee", methods=["GET"], endpoint="api_employee_list")
    @admin_required
    def list_employees():
        return jsonify([employee_to_json(e) for e in directory.list()])

    @app.route("/api/employee", methods=["POST"], endpoint="api_employee_create")
    @admin_required
    def create_employee():
        data = json_body()
        employee = directory.create(
            name=data.get("name"),
            hourly_wage=data.get("hourlyWage"),
            role=data.get("role") or "employee",
            active=data.get("active", True),
            pin=data.get("pin") or data.get("employeeId"),
        )
        return jsonify(employee_to_json(employee)), 201

    @app.route("/api/employee/<employee_id>", methods=["PATCH", "PUT"], endpoint="api_employee_update")
    @admin_required
    def update_employee(employee_id: str):
        data = json_body()
        employee = directory.update(
            employee_id,
            name=data.get("name"),
            hourly_wage=data.get("hourlyWage"),
            role=data.get("role"),
            active=data.get("active"),
        )
        return jsonify(employee_to_json(employee))

    @app.route("/api/employee/<employee_id>/deactivate", methods=["POST"], endpoint="api_employee_deactivate")
    @admin_required
    def deactivate_employee(employee_id: str):
        return jsonify(employee_to_json(directory.deactivate(employee_id)))

    @app.route("/api/employee/<employee_id>", methods=["DELETE"], endpoint="api_employee_delete")
    @admin_required
    def delete_employee(employee_id: str):
        directory.delete(employee_id)
        return "", 204
