from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import mysql.connector
from mysql.connector.constants import ClientFlag

from ..core.exceptions import DependencyFailure


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: Outside of ``transaction()`` every repository call opens a
    short-lived connection. Inside it, all repository calls on the same
    thread share one connection and the outer block commits or rolls back.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._local = threading.local()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        try:
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                # rowcount reports matched rows, so idempotent UPDATEs still count as found.
                client_flags=[ClientFlag.FOUND_ROWS],
            )
        except mysql.connector.Error as exc:
            raise DependencyFailure(f"Koneksi database gagal: {exc}") from exc

    def active_connection(self):
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[object]:
        outer = self.active_connection()
        if outer is not None:
            # Nested blocks join the outer unit of work.
            yield outer
            return

        conn = self.connect()
        self._local.conn = conn
        try:
            yield conn
            conn.commit()
        except mysql.connector.Error as exc:
            conn.rollback()
            raise DependencyFailure(f"Transaksi database gagal: {exc}") from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()
