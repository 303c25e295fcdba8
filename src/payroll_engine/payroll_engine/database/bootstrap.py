from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Any, Iterable, Mapping

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

# schema.sql names its own database; the configured one wins.
_DB_DIRECTIVES = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
# A statement is a run of non-';' text or quoted strings (which may contain ';').
_STATEMENT = re.compile(r"""(?:[^;'"]|'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")+""")


def _server_connection(config: DBConfig, *, with_database: bool = True):
    return mysql.connector.connect(**config.connect_args(with_database=with_database), use_pure=True)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema script into statements, dropping ``--`` comment lines."""
    body = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    for match in _STATEMENT.finditer(body):
        statement = match.group(0).strip()
        if statement:
            yield statement


def ensure_database_exists(db_config: Mapping[str, Any]) -> None:
    config = DBConfig.from_mapping(db_config)
    with closing(_server_connection(config, with_database=False)) as conn:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: Mapping[str, Any], *, schema_path: str | Path) -> int:
    """Create the database if needed and run every statement of ``schema_path``.

    Returns the number of statements executed.
    """
    config = DBConfig.from_mapping(db_config)
    ensure_database_exists(db_config)
    sql = _DB_DIRECTIVES.sub("", Path(schema_path).read_text(encoding="utf-8"))

    with closing(_server_connection(config)) as conn:
        cur = conn.cursor()
        executed = 0
        for statement in iter_sql_statements(sql):
            cur.execute(statement)
            executed += 1
        conn.commit()

    logger.info("Applied %d schema statements to %s", executed, config.database)
    return executed


def list_tables(db_config: Mapping[str, Any]) -> list[str]:
    with closing(_server_connection(DBConfig.from_mapping(db_config))) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [str(row[0]) for row in cur.fetchall()]
