from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, arg_int, current_actor, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    academics = container.academics_service

    # Departments, levels and classes are readable without login (sign-up form).

    @app.route("/api/departments", methods=["GET"], endpoint="api_departments")
    def list_departments():
        return jsonify([d.to_dict() for d in academics.list_departments()])

    @app.route("/api/departments/<int:department_id>", methods=["GET"], endpoint="api_department")
    def get_department(department_id: int):
        return jsonify(academics.get_department(department_id).to_dict())

    @app.route("/api/departments", methods=["POST"], endpoint="api_department_create")
    @admin_required
    def create_department():
        department = academics.create_department(current_role=current_actor().role, name=json_body().get("name"))
        return jsonify(department.to_dict()), 201

    @app.route("/api/departments/<int:department_id>", methods=["PUT"], endpoint="api_department_update")
    @admin_required
    def update_department(department_id: int):
        department = academics.update_department(
            current_role=current_actor().role, department_id=department_id, name=json_body().get("name")
        )
        return jsonify(department.to_dict())

    @app.route("/api/departments/<int:department_id>", methods=["DELETE"], endpoint="api_department_delete")
    @admin_required
    def delete_department(department_id: int):
        academics.delete_department(current_role=current_actor().role, department_id=department_id)
        return "", 204

    @app.route("/api/levels", methods=["GET"], endpoint="api_levels")
    def list_levels():
        return jsonify([lv.to_dict() for lv in academics.list_levels()])

    @app.route("/api/levels/<int:level_id>", methods=["GET"], endpoint="api_level")
    def get_level(level_id: int):
        return jsonify(academics.get_level(level_id).to_dict())

    @app.route("/api/levels", methods=["POST"], endpoint="api_level_create")
    @admin_required
    def create_level():
        data = json_body()
        level = academics.create_level(current_role=current_actor().role, number=data.get("number"), name=data.get("name"))
        return jsonify(level.to_dict()), 201

    @app.route("/api/levels/<int:level_id>", methods=["PUT"], endpoint="api_level_update")
    @admin_required
    def update_level(level_id: int):
        data = json_body()
        level = academics.update_level(
            current_role=current_actor().role, level_id=level_id, number=data.get("number"), name=data.get("name")
        )
        return jsonify(level.to_dict())

    @app.route("/api/levels/<int:level_id>", methods=["DELETE"], endpoint="api_level_delete")
    @admin_required
    def delete_level(level_id: int):
        academics.delete_level(current_role=current_actor().role, level_id=level_id)
        return "", 204

    @app.route("/api/classes", methods=["GET"], endpoint="api_classes")
    def list_classes():
        counts = container.user_service.student_counts_by_class()
        classes = academics.list_classes(department_id=arg_int("departmentId"), level_id=arg_int("levelId"))
        return jsonify([{**c.to_dict(), "studentCount": counts.get(c.class_id, 0)} for c in classes])

    @app.route("/api/classes/<int:class_id>", methods=["GET"], endpoint="api_class")
    def get_class(class_id: int):
        return jsonify(academics.get_class(class_id).to_dict())

    @app.route("/api/classes", methods=["POST"], endpoint="api_class_create")
    @admin_required
    def create_class():
        data = json_body()
        school_class = academics.create_class(
            current_role=current_actor().role,
            name=data.get("name"),
            department_id=data.get("department_id"),
            level_id=data.get("level_id"),
            academic_year=data.get("academic_year"),
        )
        return jsonify(school_class.to_dict()), 201

    @app.route("/api/classes/<int:class_id>", methods=["PUT"], endpoint="api_class_update")
    @admin_required
    def update_class(class_id: int):
        data = json_body()
        school_class = academics.update_class(
            current_role=current_actor().role,
            class_id=class_id,
            name=data.get("name"),
            department_id=data.get("department_id"),
            level_id=data.get("level_id"),
            academic_year=data.get("academic_year"),
        )
        return jsonify(school_class.to_dict())

    @app.route("/api/classes/<int:class_id>", methods=["DELETE"], endpoint="api_class_delete")
    @admin_required
    def delete_class(class_id: int):
        academics.delete_class(current_role=current_actor().role, class_id=class_id)
        return "", 204
