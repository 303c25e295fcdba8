from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DBConfig":
        """Build from a settings ``DB_CONFIG`` dict; missing keys fall back to local defaults."""
        return cls(
            host=str(values.get("host", "localhost")),
            port=int(values.get("port", 3306)),
            user=str(values.get("user", "root")),
            password=str(values.get("password", "")),
            database=str(values.get("database", "payroll_db")),
        )

    def connect_args(self, *, with_database: bool = True) -> dict[str, Any]:
        args: dict[str, Any] = {"host": self.host, "port": self.port, "user": self.user, "password": self.password}
        if with_database:
            args["database"] = self.database
        return args


class DatabaseConnection:
    """Process-wide connection factory.

    Repositories open one short-lived connection per call; a payroll or
    attendance request is a few reads followed by a single write.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    def connect(self):
        # FOUND_ROWS: rowcount counts matched rows, so an UPDATE that changes nothing still reports 1.
        return mysql.connector.connect(**self.config.connect_args(), client_flags=[ClientFlag.FOUND_ROWS])
