from __future__ import annotations

import csv
import io
from datetime import timedelta
from decimal import Decimal

from flask import Flask, jsonify, request

from ..common.http import admin_required, query_date
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS, HOURS_DECIMALS
from .model import DayStatus
from .service import EmployeeSummary, ReportData


def _num(value: Decimal) -> float:
    return float(round(value, HOURS_DECIMALS))


def day_status_to_json(s: DayStatus) -> dict:
    return {
        "employeeId": s.employee_id,
        "employeeName": s.employee_name,
        "employeeRole": s.employee_role.value,
        "date": s.day.isoformat(),
        "state": s.state.value,
        "status": s.state.clock_label,
        "breakStatus": s.state.break_label,
        "carriedIn": s.carried_in,
        "firstClockIn": s.first_clock_in.isoformat() if s.first_clock_in else None,
        "lastClockOut": s.last_clock_out.isoformat() if s.last_clock_out else None,
        "totalBreakHours": _num(s.break_hours),
        "totalHoursWorked": _num(s.worked_hours),
        "hourlyWage": float(s.hourly_wage),
        "dailyWage": _num(s.daily_wage),
    }


def summary_to_json(s: EmployeeSummary) -> dict:
    return {
        "employeeId": s.employee_id,
        "employeeName": s.employee_name,
        "daysWorked": s.days_worked,
        "totalHoursWorked": _num(s.worked_hours),
        "totalBreakHours": _num(s.break_hours),
        "totalWage": _num(s.total_wage),
    }


def _fmt_hours(hours: Decimal) -> str:
    total_seconds = int(round(hours * 3600))
    return f"{total_seconds // 3600:02d}:{total_seconds % 3600 // 60:02d}:{total_seconds % 60:02d}"


def register(app: Flask, container: Container) -> None:
    timesheets = container.timesheet_service
    ledger = container.ledger_service

    def _report_from_args() -> ReportData:
        end = query_date("end") or ledger.today()
        start = query_date("start") or end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
        employee_id = request.args.get("employeeId") or None
        return timesheets.build_report(start=start, end=end, employee_id=employee_id)

    @app.route("/api/today", methods=["GET"], endpoint="api_today")
    @admin_required
    def today():
        rows = timesheets.today(day=query_date("date"))
        return jsonify([day_status_to_json(s) for s in rows])

    @app.route("/api/report", methods=["GET"], endpoint="api_report")
    @admin_required
    def report():
        data = _report_from_args()
        return jsonify(
            {
                "start": data.start.isoformat(),
                "end": data.end.isoformat(),
                "rows": [day_status_to_json(s) for s in data.rows],
                "summary": [summary_to_json(s) for s in data.summary],
            }
        )

    @app.route("/api/report.csv", methods=["GET"], endpoint="api_report_csv")
    @admin_required
    def report_csv():
        data = _report_from_args()

        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=[
                "date",
                "employee_id",
                "employee_name",
                "role",
                "carried_in",
                "first_clock_in",
                "last_clock_out",
                "break_hours",
                "worked_hours",
                "hourly_wage",
                "daily_wage",
            ],
        )
        writer.writeheader()
        for s in data.rows:
            writer.writerow(
                {
                    "date": s.day.isoformat(),
                    "employee_id": s.employee_id,
                    "employee_name": s.employee_name,
                    "role": s.employee_role.value,
                    "carried_in": "yes" if s.carried_in else "no",
                    "first_clock_in": s.first_clock_in.astimezone(ledger.tz).strftime("%H:%M:%S") if s.first_clock_in else "-",
                    "last_clock_out": s.last_clock_out.astimezone(ledger.tz).strftime("%H:%M:%S") if s.last_clock_out else "-",
                    "break_hours": _fmt_hours(s.break_hours),
                    "worked_hours": _fmt_hours(s.worked_hours),
                    "hourly_wage": f"{s.hourly_wage:.2f}",
                    "daily_wage": f"{s.daily_wage:.0f}",
                }
            )

        filename = f"timesheet_{data.start.strftime('%Y%m%d')}_{data.end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
