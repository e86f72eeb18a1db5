from __future__ import annotations

import pytest

from conftest import SCIENCE_CLASS_ID, STUDENT_ID, TEACHER_ID, WEDNESDAY
from school_attendance.lessons.model import Lesson


@pytest.fixture
def lessons(school):
    school.lessons.add(
        Lesson(lesson_id=10, subject="Physics", class_id=SCIENCE_CLASS_ID, teacher_id=TEACHER_ID,
               day_of_week=WEDNESDAY, start_time_minutes=9 * 60)
    )
    school.lessons.add(
        Lesson(lesson_id=11, subject="Biology", class_id=SCIENCE_CLASS_ID, teacher_id=TEACHER_ID,
               day_of_week=WEDNESDAY, start_time_minutes=13 * 60)
    )


def test_login_and_current_user(client, login):
    assert client.get("/api/user").status_code == 401

    body = login("student")
    assert body["role"] == "student"
    assert client.get("/api/user").get_json()["id"] == STUDENT_ID

    client.post("/api/logout")
    assert client.get("/api/user").status_code == 401


def test_bad_credentials_return_401(client):
    resp = client.post("/api/login", json={"username": "student", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.get_json() == {"message": "Invalid username or password"}


def test_role_guards(client, login):
    login("student")
    assert client.get("/api/teachers").status_code == 403
    assert client.post("/api/lessons", json={}).status_code == 403


def test_public_academics_lists_carry_student_counts(client):
    rows = client.get("/api/classes").get_json()
    assert {r["name"]: r["studentCount"] for r in rows} == {"Humanities 1B": 1, "Science 1A": 1}
    assert client.get("/api/classes/99").status_code == 404


def test_student_marks_inside_window(client, login, lessons):
    login("student")
    resp = client.post("/api/attendance", json={"lessonId": 10, "studentId": STUDENT_ID, "status": "present"})

    assert resp.status_code == 201
    assert resp.get_json()["status"] == "present"
    assert resp.get_json()["occurrenceDate"] == "2025-01-15"


def test_student_denied_outside_window_gets_window_payload(client, login, lessons):
    login("student")
    resp = client.post("/api/attendance", json={"lessonId": 11, "studentId": STUDENT_ID, "status": "present"})

    assert resp.status_code == 403
    body = resp.get_json()
    assert body["message"] == "Attendance window is not open"
    assert body["opensAt"] == "2025-01-15T12:50:00"
    assert body["closesAt"] == "2025-01-15T14:00:00"
    assert body["currentTime"] == "2025-01-15T09:15:00"
    assert body["isInstantLesson"] is False


def test_force_flag_lets_student_through(client, login, lessons):
    login("student")
    resp = client.post(
        "/api/attendance?force=true", json={"lessonId": 11, "studentId": STUDENT_ID, "status": "present"}
    )
    assert resp.status_code == 201


def test_validation_errors_map_to_400(client, login, lessons):
    login("teacher")
    resp = client.post("/api/attendance", json={"lessonId": 10, "studentId": STUDENT_ID, "status": "late"})
    assert resp.status_code == 400


def test_teacher_creates_instant_lesson(client, login):
    login("teacher")
    resp = client.post("/api/instant-lesson", json={"subject": "Revision", "classId": SCIENCE_CLASS_ID})

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["startTimeMinutes"] == 9 * 60 + 15
    assert body["createdAt"] == "2025-01-15T09:15:00"


def test_recurring_lessons_route(client, login):
    login("teacher")
    resp = client.post(
        "/api/lessons/recurring",
        json={
            "subject": "Chemistry",
            "classId": SCIENCE_CLASS_ID,
            "startTimeMinutes": 600,
            "durationMinutes": 45,
            "recurringPattern": {"daysOfWeek": [1, 4], "numberOfWeeks": 8},
        },
    )

    assert resp.status_code == 201
    assert resp.get_json()["message"] == "Successfully created 2 recurring lessons"


def test_clear_data_requires_confirmation(client, login, school):
    login("admin")
    resp = client.post("/api/system/clear-data", json={})
    assert resp.status_code == 400
    assert school.classes.items

    resp = client.post("/api/system/clear-data", json={"confirm": "yes-delete-all-data"})
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True
    assert not school.classes.items


def test_settings_roundtrip_uses_camel_case(client, login):
    login("admin")
    resp = client.put("/api/system-settings", json={"defaultAttendanceWindow": 20})

    assert resp.status_code == 200
    assert client.get("/api/system-settings").get_json()["defaultAttendanceWindow"] == 20


def test_admin_stats_route(client, login):
    login("admin")
    body = client.get("/api/admin/stats").get_json()
    assert body["totalStudents"] == 2
    assert body["overallAttendanceRate"] == 0
