"""In-memory repositories used by the service and route tests."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from school_attendance.academics.model import Department, Level, SchoolClass
from school_attendance.attendance.model import (
    AttendanceHistoryRow,
    AttendanceRecord,
    AttendanceTally,
    RecentAttendanceRow,
)
from school_attendance.core.enums import AttendanceStatus, Role
from school_attendance.lessons.model import Lesson, LessonDraft
from school_attendance.system.model import SystemSettings
from school_attendance.users.model import TeacherDepartment, User

# Regular lessons are created long before "now" so they never count as instant.
OLD_CREATED_AT = datetime(2024, 1, 1, 8, 0)


class InMemoryDepartments:
    def __init__(self):
        self.items: dict[int, Department] = {}
        self._next_id = 1

    def list_all(self):
        return sorted(self.items.values(), key=lambda d: d.name)

    def get_by_id(self, department_id):
        return self.items.get(int(department_id))

    def get_by_name(self, name):
        return next((d for d in self.items.values() if d.name == name), None)

    def create(self, *, name):
        did = self._next_id
        self._next_id += 1
        self.items[did] = Department(department_id=did, name=name)
        return did

    def update(self, department_id, *, name):
        if int(department_id) not in self.items:
            return False
        self.items[int(department_id)] = replace(self.items[int(department_id)], name=name)
        return True

    def delete(self, department_id):
        return self.items.pop(int(department_id), None) is not None


class InMemoryLevels:
    def __init__(self):
        self.items: dict[int, Level] = {}
        self._next_id = 1

    def list_all(self):
        return sorted(self.items.values(), key=lambda lv: lv.number)

    def get_by_id(self, level_id):
        return self.items.get(int(level_id))

    def get_by_number(self, number):
        return next((lv for lv in self.items.values() if lv.number == int(number)), None)

    def create(self, *, number, name):
        lid = self._next_id
        self._next_id += 1
        self.items[lid] = Level(level_id=lid, number=int(number), name=name)
        return lid

    def update(self, level_id, *, number, name):
        if int(level_id) not in self.items:
            return False
        self.items[int(level_id)] = replace(self.items[int(level_id)], number=int(number), name=name)
        return True

    def delete(self, level_id):
        return self.items.pop(int(level_id), None) is not None


class InMemoryClasses:
    def __init__(self):
        self.items: dict[int, SchoolClass] = {}
        self._next_id = 1

    def list_all(self, *, department_id=None, level_id=None):
        out = [
            c
            for c in self.items.values()
            if (department_id is None or c.department_id == department_id)
            and (level_id is None or c.level_id == level_id)
        ]
        return sorted(out, key=lambda c: c.name)

    def get_by_id(self, class_id):
        return self.items.get(int(class_id))

    def create(self, *, name, department_id, level_id, academic_year):
        cid = self._next_id
        self._next_id += 1
        self.items[cid] = SchoolClass(
            class_id=cid,
            name=name,
            department_id=int(department_id),
            level_id=int(level_id),
            academic_year=academic_year,
        )
        return cid

    def update(self, class_id, *, name, department_id, level_id, academic_year):
        if int(class_id) not in self.items:
            return False
        self.items[int(class_id)] = SchoolClass(
            class_id=int(class_id),
            name=name,
            department_id=int(department_id),
            level_id=int(level_id),
            academic_year=academic_year,
        )
        return True

    def delete(self, class_id):
        return self.items.pop(int(class_id), None) is not None


class InMemoryUsers:
    def __init__(self):
        self.items: dict[int, User] = {}
        self._next_id = 1

    def add(self, user: User) -> User:
        self.items[user.user_id] = user
        self._next_id = max(self._next_id, user.user_id + 1)
        return user

    def get_by_id(self, user_id):
        return self.items.get(int(user_id))

    def get_by_username(self, username):
        return next((u for u in self.items.values() if u.username == username), None)

    def list_users(self, *, role=None, class_id=None):
        out = [
            u
            for u in self.items.values()
            if (role is None or u.role == role) and (class_id is None or u.class_id == class_id)
        ]
        return sorted(out, key=lambda u: u.full_name)

    def count_by_role(self, role):
        return len(self.list_users(role=role))

    def create_user(self, *, username, password_hash, full_name, role, department_id=None, level_id=None, class_id=None):
        uid = self._next_id
        self._next_id += 1
        self.items[uid] = User(
            user_id=uid,
            username=username,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
            department_id=department_id,
            level_id=level_id,
            class_id=class_id,
        )
        return uid

    def update_user(self, user_id, **fields):
        user = self.items.get(int(user_id))
        if not user:
            return False
        self.items[int(user_id)] = replace(user, **fields)
        return True

    def delete_by_id(self, user_id):
        return self.items.pop(int(user_id), None) is not None


class InMemoryTeacherDepartments:
    def __init__(self, departments: InMemoryDepartments, users: InMemoryUsers):
        self.links: set[tuple[int, int]] = set()
        self._departments = departments
        self._users = users

    def list_for_teacher(self, teacher_id):
        out = []
        for t, d in sorted(self.links):
            if t == int(teacher_id):
                department = self._departments.get_by_id(d)
                out.append(TeacherDepartment(teacher_id=t, department_id=d, department_name=department.name if department else None))
        return out

    def list_teachers(self, department_id):
        ids = [t for t, d in self.links if d == int(department_id)]
        return [self._users.get_by_id(t) for t in sorted(ids) if self._users.get_by_id(t)]

    def add(self, *, teacher_id, department_id):
        key = (int(teacher_id), int(department_id))
        if key in self.links:
            return False
        self.links.add(key)
        return True

    def remove(self, *, teacher_id, department_id):
        key = (int(teacher_id), int(department_id))
        if key not in self.links:
            return False
        self.links.remove(key)
        return True


class InMemoryLessons:
    def __init__(self):
        self.items: dict[int, Lesson] = {}
        self._next_id = 1

    def add(self, lesson: Lesson) -> Lesson:
        self.items[lesson.lesson_id] = lesson
        self._next_id = max(self._next_id, lesson.lesson_id + 1)
        return lesson

    def get_by_id(self, lesson_id):
        return self.items.get(int(lesson_id))

    def list_lessons(self, *, class_id=None, teacher_id=None, day_of_week=None):
        out = [
            l
            for l in self.items.values()
            if (class_id is None or l.class_id == class_id)
            and (teacher_id is None or l.teacher_id == teacher_id)
            and (day_of_week is None or l.day_of_week == day_of_week)
        ]
        return sorted(out, key=lambda l: (l.day_of_week, l.start_time_minutes))

    def find_duplicate(self, draft: LessonDraft, *, exclude_id=None):
        for l in self.items.values():
            if l.lesson_id == exclude_id:
                continue
            if (l.class_id, l.teacher_id, l.day_of_week, l.subject, l.start_time_minutes) == (
                draft.class_id,
                draft.teacher_id,
                draft.day_of_week,
                draft.subject,
                draft.start_time_minutes,
            ):
                return l
        return None

    def create(self, draft: LessonDraft, *, created_at=None):
        lid = self._next_id
        self._next_id += 1
        self.items[lid] = Lesson(lesson_id=lid, created_at=created_at or OLD_CREATED_AT, **vars(draft))
        return lid

    def update(self, lesson_id, draft: LessonDraft):
        current = self.items.get(int(lesson_id))
        if not current:
            return False
        self.items[int(lesson_id)] = Lesson(lesson_id=current.lesson_id, created_at=current.created_at, **vars(draft))
        return True

    def delete(self, lesson_id):
        return self.items.pop(int(lesson_id), None) is not None

    def count(self, *, day_of_week=None, teacher_id=None):
        return len(self.list_lessons(day_of_week=day_of_week, teacher_id=teacher_id))


class InMemoryAttendance:
    def __init__(self, lessons: InMemoryLessons, users: InMemoryUsers, classes: InMemoryClasses):
        self.rows: dict[tuple[int, int, date], AttendanceRecord] = {}
        self._next_id = 1
        self._lessons = lessons
        self._users = users
        self._classes = classes

    def upsert(self, *, lesson_id, student_id, occurrence_date, status, marked_at):
        key = (int(lesson_id), int(student_id), occurrence_date)
        existing = self.rows.get(key)
        if existing:
            record = replace(existing, status=status, marked_at=marked_at)
        else:
            record = AttendanceRecord(
                attendance_id=self._next_id,
                lesson_id=int(lesson_id),
                student_id=int(student_id),
                occurrence_date=occurrence_date,
                status=status,
                marked_at=marked_at,
                created_at=marked_at,
            )
            self._next_id += 1
        self.rows[key] = record
        return record

    def list_records(self, *, lesson_ids=None, student_id=None):
        out = [
            r
            for r in self.rows.values()
            if (lesson_ids is None or r.lesson_id in lesson_ids) and (student_id is None or r.student_id == student_id)
        ]
        return sorted(out, key=lambda r: (r.occurrence_date, -r.attendance_id), reverse=True)

    def history_for_student(self, student_id, *, limit):
        out = []
        for r in self.list_records(student_id=int(student_id)):
            lesson = self._lessons.get_by_id(r.lesson_id)
            if not lesson:
                continue
            out.append(
                AttendanceHistoryRow(
                    attendance_id=r.attendance_id,
                    lesson_id=r.lesson_id,
                    subject=lesson.subject,
                    day_of_week=lesson.day_of_week,
                    start_time_minutes=lesson.start_time_minutes,
                    duration_minutes=lesson.duration_minutes,
                    location=lesson.location,
                    occurrence_date=r.occurrence_date,
                    status=r.status,
                    marked_at=r.marked_at,
                )
            )
        return out[:limit]

    def recent(self, *, limit):
        out = []
        for r in sorted(self.rows.values(), key=lambda r: r.marked_at, reverse=True):
            student = self._users.get_by_id(r.student_id)
            lesson = self._lessons.get_by_id(r.lesson_id)
            if not student or not lesson:
                continue
            school_class = self._classes.get_by_id(lesson.class_id)
            out.append(
                RecentAttendanceRow(
                    attendance_id=r.attendance_id,
                    student_id=r.student_id,
                    student_name=student.full_name,
                    lesson_id=r.lesson_id,
                    subject=lesson.subject,
                    class_name=school_class.name if school_class else None,
                    status=r.status,
                    marked_at=r.marked_at,
                )
            )
        return out[:limit]

    @staticmethod
    def _tally(records) -> AttendanceTally:
        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        return AttendanceTally(present=present, absent=len(records) - present)

    def tally(self, *, student_id=None, lesson_ids=None):
        return self._tally(self.list_records(lesson_ids=lesson_ids, student_id=student_id))

    def tally_by_student(self, lesson_ids):
        grouped = defaultdict(list)
        for r in self.list_records(lesson_ids=lesson_ids):
            grouped[r.student_id].append(r)
        return {k: self._tally(v) for k, v in grouped.items()}

    def tally_by_class(self):
        grouped = defaultdict(list)
        for r in self.rows.values():
            lesson = self._lessons.get_by_id(r.lesson_id)
            if lesson:
                grouped[lesson.class_id].append(r)
        return {k: self._tally(v) for k, v in grouped.items()}


class InMemorySettings:
    def __init__(self, settings: Optional[SystemSettings] = None):
        self.settings = settings
        self.saves = 0

    def get(self):
        return self.settings

    def save(self, settings):
        self.settings = settings
        self.saves += 1


class InMemoryMaintenance:
    def __init__(self, users, teacher_departments, departments, levels, classes, lessons, attendance):
        self._users = users
        self._teacher_departments = teacher_departments
        self._departments = departments
        self._levels = levels
        self._classes = classes
        self._lessons = lessons
        self._attendance = attendance

    def clear_school_data(self, *, admin_password_hash):
        self._attendance.rows.clear()
        self._lessons.items.clear()
        self._teacher_departments.links.clear()
        for uid, user in list(self._users.items.items()):
            if user.role != Role.ADMIN:
                del self._users.items[uid]
            else:
                self._users.items[uid] = replace(
                    user, password_hash=admin_password_hash, department_id=None, level_id=None, class_id=None
                )
        self._classes.items.clear()
        self._levels.items.clear()
        self._departments.items.clear()
