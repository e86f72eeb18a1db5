from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import arg_int, current_actor, json_body, login_required, staff_required
from ..container import Container

_LESSON_FIELDS = (
    "subject",
    "class_id",
    "teacher_id",
    "day_of_week",
    "start_time_minutes",
    "duration_minutes",
    "lesson_count",
    "attendance_window_minutes",
    "location",
    "is_active",
)


def _lesson_fields(data: dict) -> dict:
    return {k: data[k] for k in _LESSON_FIELDS if k in data}


def register(app: Flask, container: Container) -> None:
    lessons = container.lesson_service

    @app.route("/api/lessons/today", methods=["GET"], endpoint="api_lessons_today")
    @login_required
    def today():
        rows = lessons.todays_lessons(actor=current_actor(), class_id=arg_int("classId"), teacher_id=arg_int("teacherId"))
        return jsonify([l.to_dict() for l in rows])

    @app.route("/api/lessons/student", methods=["GET"], endpoint="api_lessons_student")
    @login_required
    def for_student():
        rows = lessons.lessons_for_student(actor=current_actor(), student_id=arg_int("studentId"))
        return jsonify([l.to_dict() for l in rows])

    @app.route("/api/lessons/status", methods=["GET"], endpoint="api_lessons_status")
    @login_required
    def statuses():
        return jsonify([v.to_dict() for v in lessons.status_views(actor=current_actor())])

    @app.route("/api/lessons", methods=["GET"], endpoint="api_lessons")
    @login_required
    def list_lessons():
        rows = lessons.list_lessons(actor=current_actor(), class_id=arg_int("classId"), teacher_id=arg_int("teacherId"))
        return jsonify([l.to_dict() for l in rows])

    @app.route("/api/lessons/<int:lesson_id>", methods=["GET"], endpoint="api_lesson")
    @login_required
    def get_lesson(lesson_id: int):
        return jsonify(lessons.get(actor=current_actor(), lesson_id=lesson_id).to_dict())

    @app.route("/api/lessons", methods=["POST"], endpoint="api_lesson_create")
    @staff_required
    def create_lesson():
        lesson = lessons.create(actor=current_actor(), **_lesson_fields(json_body()))
        return jsonify(lesson.to_dict()), 201

    @app.route("/api/lessons/recurring", methods=["POST"], endpoint="api_lesson_recurring")
    @staff_required
    def create_recurring():
        data = json_body()
        pattern = data.get("recurring_pattern") or {}
        created = lessons.create_recurring(
            actor=current_actor(),
            days_of_week=pattern.get("daysOfWeek"),
            number_of_weeks=pattern.get("numberOfWeeks"),
            **_lesson_fields(data),
        )
        return (
            jsonify(
                {
                    "message": f"Successfully created {len(created)} recurring lessons",
                    "lessons": [l.to_dict() for l in created],
                }
            ),
            201,
        )

    @app.route("/api/lessons/<int:lesson_id>", methods=["PUT"], endpoint="api_lesson_update")
    @staff_required
    def update_lesson(lesson_id: int):
        lesson = lessons.update(actor=current_actor(), lesson_id=lesson_id, **_lesson_fields(json_body()))
        return jsonify(lesson.to_dict())

    @app.route("/api/lessons/<int:lesson_id>", methods=["DELETE"], endpoint="api_lesson_delete")
    @staff_required
    def delete_lesson(lesson_id: int):
        lessons.delete(actor=current_actor(), lesson_id=lesson_id)
        return "", 204

    @app.route("/api/instant-lesson", methods=["POST"], endpoint="api_instant_lesson")
    @login_required
    def instant_lesson():
        data = json_body()
        lesson = lessons.create_instant(
            actor=current_actor(),
            subject=data.get("subject"),
            class_id=data.get("class_id"),
            location=data.get("location"),
            duration_minutes=data.get("duration_minutes"),
            attendance_window_minutes=data.get("attendance_window_minutes"),
        )
        return jsonify(lesson.to_dict()), 201
