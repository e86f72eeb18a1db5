from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, arg_int, current_actor, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="api_attendance_stats")
    @login_required
    def attendance_stats():
        return jsonify(reports.stats_for(actor=current_actor(), class_id=arg_int("classId")))

    @app.route("/api/admin/stats", methods=["GET"], endpoint="api_admin_stats")
    @admin_required
    def admin_stats():
        return jsonify(reports.admin_stats(current_role=current_actor().role))

    @app.route("/api/students/<int:student_id>/attendance-report", methods=["GET"], endpoint="api_student_report")
    @admin_required
    def student_report(student_id: int):
        return jsonify(reports.student_report(current_role=current_actor().role, student_id=student_id).to_dict())
