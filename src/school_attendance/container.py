from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .academics.mysql_class_repository import MySQLClassRepository
from .academics.mysql_department_repository import MySQLDepartmentRepository
from .academics.mysql_level_repository import MySQLLevelRepository
from .academics.service import AcademicsService
from .attendance.factory import MarkingStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, now_local
from .database.connection import DBConfig, DatabaseConnection
from .lessons.mysql_lesson_repository import MySQLLessonRepository
from .lessons.service import LessonService
from .reports.service import ReportService
from .system.mysql_settings_repository import MySQLMaintenanceRepository, MySQLSettingsRepository
from .system.service import SettingsService
from .users.mysql_teacher_department_repository import MySQLTeacherDepartmentRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    user_service: UserService
    academics_service: AcademicsService
    lesson_service: LessonService
    attendance_service: AttendanceService
    report_service: ReportService
    settings_service: SettingsService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    users_repo,
    teacher_departments_repo,
    departments_repo,
    levels_repo,
    classes_repo,
    lessons_repo,
    attendance_repo,
    settings_repo,
    maintenance_repo,
    clock: Clock = now_local,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any repository implementations (MySQL or in-memory)."""
    settings_service = SettingsService(settings_repo, maintenance_repo)

    return Container(
        conn=conn,
        auth_service=AuthService(users_repo),
        user_service=UserService(
            users_repo,
            teacher_departments_repo,
            classes_repo,
            departments_repo,
            lessons_repo,
        ),
        academics_service=AcademicsService(departments_repo, levels_repo, classes_repo),
        lesson_service=LessonService(
            lessons_repo,
            classes_repo,
            users_repo,
            teacher_departments_repo,
            settings_service,
            clock=clock,
        ),
        attendance_service=AttendanceService(
            attendance_repo,
            lessons_repo,
            users_repo,
            strategy_factory=MarkingStrategyFactory(),
            clock=clock,
        ),
        report_service=ReportService(
            attendance_repo,
            lessons_repo,
            users_repo,
            classes_repo,
            departments_repo,
            clock=clock,
        ),
        settings_service=settings_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return build_services(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        teacher_departments_repo=MySQLTeacherDepartmentRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        levels_repo=MySQLLevelRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        lessons_repo=MySQLLessonRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        maintenance_repo=MySQLMaintenanceRepository(conn),
    )
