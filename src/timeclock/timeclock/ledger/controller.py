from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import query_date, self_or_admin_required
from ..container import Container
from ..payroll.controller import day_status_to_json
from ..payroll.model import DayStatus
from .model import ClockEvent


def event_to_json(e: ClockEvent) -> dict:
    return {
        "eventId": e.event_id,
        "employeeId": e.employee_id,
        "kind": e.kind.value,
        "occurredAt": e.occurred_at.isoformat(),
    }


def _status_payload(s: DayStatus) -> dict:
    return {
        "employeeId": s.employee_id,
        "status": s.state.clock_label,
        "breakStatus": s.state.break_label,
        "day": day_status_to_json(s),
    }


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger_service

    @app.route("/api/<employee_id>/status", methods=["GET"], endpoint="api_status")
    @self_or_admin_required
    def status(employee_id: str):
        return jsonify(_status_payload(ledger.current_status(employee_id)))

    @app.route("/api/<employee_id>/clock", methods=["POST"], endpoint="api_clock")
    @self_or_admin_required
    def clock(employee_id: str):
        return jsonify(_status_payload(ledger.toggle_clock(employee_id)))

    @app.route("/api/<employee_id>/break", methods=["POST"], endpoint="api_break")
    @self_or_admin_required
    def take_break(employee_id: str):
        return jsonify(_status_payload(ledger.toggle_break(employee_id)))

    @app.route("/api/<employee_id>/events", methods=["GET"], endpoint="api_events")
    @self_or_admin_required
    def events(employee_id: str):
        day = query_date("date") or ledger.today()
        return jsonify(
            {
                "employeeId": employee_id,
                "date": day.isoformat(),
                "events": [event_to_json(e) for e in ledger.events_for_day(employee_id, day)],
            }
        )
