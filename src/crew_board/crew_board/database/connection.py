from __future__ import annotations

from dataclasses import dataclass

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
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "crew_board")),
        )


class DatabaseConnection:
    """DB connection factory handed to every repository.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    Built once in ``build_container`` and injected, never looked up globally.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self, *, with_database: bool = True):
        kwargs = dict(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            # rowcount counts matched rows, so an UPDATE that changes nothing still reports 1
            client_flags=[ClientFlag.FOUND_ROWS],
        )
        if with_database:
            kwargs["database"] = self._config.database
        return mysql.connector.connect(**kwargs)
