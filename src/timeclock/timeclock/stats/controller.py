from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import admin_required, query_date
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/stats", methods=["GET"], endpoint="api_stats")
    @admin_required
    def stats():
        s = container.stats_service.daily_stats(query_date("date"))
        return jsonify(
            {
                "date": s.day.isoformat(),
                "totalEmployees": s.total_employees,
                "clockedIn": s.clocked_in,
                "onBreak": s.on_break,
            }
        )
