from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..common.web import (
    admin_required,
    arg_int,
    current_actor,
    json_body,
    login_required,
    staff_required,
    start_session,
)
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    users = container.user_service

    # Auth

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        actor = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        start_session(actor)
        logger.info("User logged in: %s (%s)", actor.user_id, actor.role.value)
        return jsonify(actor.to_dict())

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/register", methods=["POST"], endpoint="api_register")
    def register_student_account():
        data = json_body()
        student = users.self_register(
            full_name=data.get("full_name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            class_id=data.get("class_id"),
        )
        actor = container.auth_service.session_user(student.user_id)
        start_session(actor)
        return jsonify(student.to_public_dict()), 201

    @app.route("/api/user", methods=["GET"], endpoint="api_user")
    @login_required
    def me():
        return jsonify(current_actor().to_dict())

    # Teachers

    @app.route("/api/teachers", methods=["GET"], endpoint="api_teachers")
    @admin_required
    def list_teachers():
        return jsonify([t.to_public_dict() for t in users.list_teachers(current_role=current_actor().role)])

    @app.route("/api/teachers/<int:teacher_id>", methods=["GET"], endpoint="api_teacher")
    @admin_required
    def get_teacher(teacher_id: int):
        return jsonify(users.get_teacher(current_role=current_actor().role, teacher_id=teacher_id).to_public_dict())

    @app.route("/api/teachers", methods=["POST"], endpoint="api_teacher_create")
    @admin_required
    def create_teacher():
        data = json_body()
        teacher = users.create_teacher(
            current_role=current_actor().role,
            full_name=data.get("full_name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            department_id=data.get("department_id"),
        )
        return jsonify(teacher.to_public_dict()), 201

    @app.route("/api/teachers/<int:teacher_id>", methods=["PUT"], endpoint="api_teacher_update")
    @admin_required
    def update_teacher(teacher_id: int):
        data = json_body()
        teacher = users.update_teacher(
            current_role=current_actor().role,
            teacher_id=teacher_id,
            full_name=data.get("full_name"),
            username=data.get("username"),
            password=data.get("password"),
            department_id=data.get("department_id"),
        )
        return jsonify(teacher.to_public_dict())

    @app.route("/api/teachers/<int:teacher_id>", methods=["DELETE"], endpoint="api_teacher_delete")
    @admin_required
    def delete_teacher(teacher_id: int):
        users.delete_teacher(current_role=current_actor().role, teacher_id=teacher_id)
        return "", 204

    @app.route("/api/teachers/<int:teacher_id>/departments", methods=["GET"], endpoint="api_teacher_departments")
    @login_required
    def teacher_departments(teacher_id: int):
        links = users.list_teacher_departments(actor=current_actor(), teacher_id=teacher_id)
        return jsonify([td.to_dict() for td in links])

    @app.route("/api/teachers/<int:teacher_id>/departments", methods=["POST"], endpoint="api_teacher_department_add")
    @admin_required
    def add_teacher_department(teacher_id: int):
        link = users.assign_teacher_department(
            current_role=current_actor().role,
            teacher_id=teacher_id,
            department_id=json_body().get("department_id"),
        )
        return jsonify(link.to_dict()), 201

    @app.route(
        "/api/teachers/<int:teacher_id>/departments/<int:department_id>",
        methods=["DELETE"],
        endpoint="api_teacher_department_remove",
    )
    @admin_required
    def remove_teacher_department(teacher_id: int, department_id: int):
        users.remove_teacher_department(
            current_role=current_actor().role, teacher_id=teacher_id, department_id=department_id
        )
        return "", 204

    @app.route("/api/departments/<int:department_id>/teachers", methods=["GET"], endpoint="api_department_teachers")
    @login_required
    def department_teachers(department_id: int):
        return jsonify([t.to_public_dict() for t in users.list_department_teachers(department_id)])

    @app.route("/api/teacher/departments", methods=["GET"], endpoint="api_my_departments")
    @staff_required
    def my_departments():
        actor = current_actor()
        links = users.list_teacher_departments(actor=actor, teacher_id=actor.user_id)
        return jsonify([td.to_dict() for td in links])

    @app.route("/api/admin/users", methods=["GET"], endpoint="api_admin_users")
    @admin_required
    def staff_users():
        return jsonify(users.list_staff_view(current_role=current_actor().role))

    # Students

    @app.route("/api/students", methods=["GET"], endpoint="api_students")
    @login_required
    def list_students():
        return jsonify(users.list_students_view(actor=current_actor(), class_id=arg_int("classId")))

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="api_student")
    @admin_required
    def get_student(student_id: int):
        return jsonify(users.get_student_view(current_role=current_actor().role, student_id=student_id))

    @app.route("/api/students", methods=["POST"], endpoint="api_student_create")
    @admin_required
    def create_student():
        data = json_body()
        student = users.create_student(
            current_role=current_actor().role,
            full_name=data.get("full_name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            class_id=data.get("class_id"),
        )
        return jsonify(student.to_public_dict()), 201

    @app.route("/api/students/<int:student_id>", methods=["PUT", "PATCH"], endpoint="api_student_update")
    @admin_required
    def update_student(student_id: int):
        data = json_body()
        student = users.update_student(
            current_role=current_actor().role,
            student_id=student_id,
            full_name=data.get("full_name"),
            username=data.get("username"),
            password=data.get("password"),
            class_id=data.get("class_id"),
        )
        return jsonify(student.to_public_dict())

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="api_student_delete")
    @admin_required
    def delete_student(student_id: int):
        users.delete_student(current_role=current_actor().role, student_id=student_id)
        return "", 204

    @app.route("/api/teacher/register-student", methods=["POST"], endpoint="api_register_student")
    @staff_required
    def register_student():
        data = json_body()
        student = users.register_student(
            actor=current_actor(), student_id=data.get("student_id"), class_id=data.get("class_id")
        )
        return jsonify({"message": "Student registered to class successfully", "student": student.to_public_dict()})

    @app.route("/api/teacher/deregister-student", methods=["POST"], endpoint="api_deregister_student")
    @staff_required
    def deregister_student():
        student = users.deregister_student(actor=current_actor(), student_id=json_body().get("student_id"))
        return jsonify({"message": "Student deregistered from class successfully", "student": student.to_public_dict()})
