from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from ..core.constants import DEFAULT_HOLIDAYS
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


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


def _run_script(conn_factory: DatabaseConnection, sql: str) -> int:
    conn = conn_factory.connect()
    count = 0
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(_strip_create_db_and_use(sql)):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def ensure_database_exists(db_config: dict) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    count = _run_script(conn_factory, Path(schema_path).read_text(encoding="utf-8"))
    logger.info("schema applied (%d statements)", count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    count = _run_script(conn_factory, Path(seed_path).read_text(encoding="utf-8"))
    logger.info("seed applied (%d statements)", count)


def ensure_default_holidays(db_config: dict) -> int:
    """Insert the built-in holidays when the table is still empty."""
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SELECT COUNT(*) FROM holidays")
        (existing,) = cur.fetchone()
        if existing:
            return 0
        cur.executemany(
            "INSERT INTO holidays(holiday_id, holiday_date, name, extra_hourly_pay) VALUES(%s,%s,%s,%s)",
            list(DEFAULT_HOLIDAYS),
        )
        conn.commit()
        return len(DEFAULT_HOLIDAYS)
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
