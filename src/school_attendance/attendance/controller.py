from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, arg_bool, arg_int, current_actor, json_body, login_required, student_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    @login_required
    def list_attendance():
        records = attendance.list_for(
            actor=current_actor(),
            lesson_id=arg_int("lessonId"),
            student_id=arg_int("studentId"),
            day_name=request.args.get("dayOfWeek") or None,
        )
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_mark")
    @login_required
    def mark_attendance():
        data = json_body()
        record = attendance.mark(
            actor=current_actor(),
            lesson_id=data.get("lesson_id"),
            student_id=data.get("student_id"),
            status=data.get("status"),
            force=arg_bool("force"),
        )
        return jsonify(record.to_dict()), 201

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @student_required
    def history():
        return jsonify([row.to_dict() for row in attendance.history(current_actor().user_id)])

    @app.route("/api/admin/recent-attendance", methods=["GET"], endpoint="api_recent_attendance")
    @admin_required
    def recent_attendance():
        return jsonify([row.to_dict() for row in attendance.recent()])
