from __future__ import annotations

import logging
from dataclasses import dataclass

import mysql.connector

from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)


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
            database=str(db_config.get("database", "class_attendance")),
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Connection factory with an explicit lifecycle.

    Opened once at startup and handed to every repository; each operation
    takes a short-lived connection from it. After ``close()`` no further
    connections are handed out.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._open = False

    @property
    def config(self) -> DBConfig:
        return self._config

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> "DatabaseConnection":
        conn = self._raw_connect()
        try:
            conn.ping(reconnect=False)
        finally:
            conn.close()
        self._open = True
        logger.info("Database ready at %s", self._config.describe())
        return self

    def close(self) -> None:
        if self._open:
            self._open = False
            logger.info("Database connection factory closed")

    def connect(self):
        if not self._open:
            raise StorageError("Database connection is closed")
        return self._raw_connect()

    def _raw_connect(self):
        try:
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
            )
        except mysql.connector.Error as e:
            raise StorageError(f"Cannot connect to {self._config.describe()}: {e}") from e
