from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).resolve().parent
SCHEMA_PATH = SQL_DIR / "schema.sql"
SEED_PATH = SQL_DIR / "seed.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql_file(conn_factory: DatabaseConnection, path: Path) -> int:
    sql = _strip_line_comments(_strip_create_db_and_use(path.read_text(encoding="utf-8")))
    conn = conn_factory.connect()
    executed = 0
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            executed += 1
        conn.commit()
    finally:
        conn.close()
    return executed


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    conn_factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    count = _exec_sql_file(conn_factory, Path(schema_path))
    logger.info("Applied schema %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path = SEED_PATH) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    count = _exec_sql_file(conn_factory, Path(seed_path))
    logger.info("Applied seed %s (%d statements)", seed_path, count)


def ensure_demo_users(db_config: dict) -> None:
    """Create or refresh one admin, one teacher and one student account."""
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def get_id(sql: str, params: tuple) -> int:
            cur.execute(sql, params)
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing seed row for {params!r}; apply seed.sql first")
            return int(row["id"])

        dept_science = get_id("SELECT department_id AS id FROM departments WHERE name=%s", ("Science",))
        level_1 = get_id("SELECT level_id AS id FROM levels WHERE number=%s", (1,))
        class_1a = get_id("SELECT class_id AS id FROM classes WHERE name=%s", ("Science 1A",))

        def upsert_user(full_name: str, username: str, password: str, role: str, **links) -> int:
            password_hash = generate_password_hash(password)
            cur.execute(
                """
                INSERT INTO users (full_name, username, password_hash, role, department_id, level_id, class_id)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE full_name=VALUES(full_name), password_hash=VALUES(password_hash),
                    role=VALUES(role), department_id=VALUES(department_id), level_id=VALUES(level_id),
                    class_id=VALUES(class_id)
                """,
                (
                    full_name,
                    username,
                    password_hash,
                    role,
                    links.get("department_id"),
                    links.get("level_id"),
                    links.get("class_id"),
                ),
            )
            return get_id("SELECT user_id AS id FROM users WHERE username=%s", (username,))

        upsert_user("Admin Demo", "admin", "admin123", "admin")
        teacher_id = upsert_user("Teacher Demo", "teacher", "teacher123", "teacher", department_id=dept_science)
        upsert_user(
            "Student Demo",
            "student",
            "student123",
            "student",
            department_id=dept_science,
            level_id=level_1,
            class_id=class_1a,
        )
        cur.execute(
            "INSERT IGNORE INTO teacher_departments (teacher_id, department_id) VALUES (%s, %s)",
            (teacher_id, dept_science),
        )

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo users ready (admin, teacher, student)")


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
