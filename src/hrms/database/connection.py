from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import pooling
from mysql.connector.errors import PoolError

from ..core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

_POOL_RETRY_INTERVAL = 0.05


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_name: str = "hrms_pool"
    pool_size: int = 5
    time_zone: Optional[str] = None
    pool_wait_seconds: float = 2.0


class DatabaseConnection:
    """Process-wide connection pool.

    Note: The pool is created on first use so the app (and tests) can be
    built without a reachable database. Each unit of work borrows a pooled
    connection and must close it to hand it back.
    """

    _instance: Optional["DatabaseConnection"] = None
    _instance_lock = threading.Lock()

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._pool_lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = DatabaseConnection(config)
            return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        with self._pool_lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name=self._config.pool_name,
                    pool_size=int(self._config.pool_size),
                    pool_reset_session=True,
                    host=self._config.host,
                    port=int(self._config.port),
                    user=self._config.user,
                    password=self._config.password,
                    database=self._config.database,
                    autocommit=False,
                )
                logger.info(
                    "Connection pool %s ready (%s@%s:%s/%s, size=%s)",
                    self._config.pool_name,
                    self._config.user,
                    self._config.host,
                    self._config.port,
                    self._config.database,
                    self._config.pool_size,
                )
            return self._pool

    def _borrow(self):
        """Wait up to pool_wait_seconds for a free pooled connection."""
        pool = self._get_pool()
        deadline = time.monotonic() + float(self._config.pool_wait_seconds)
        while True:
            try:
                return pool.get_connection()
            except PoolError:
                if time.monotonic() >= deadline:
                    logger.warning(
                        "Connection pool %s exhausted after %.1fs (size=%s)",
                        self._config.pool_name,
                        self._config.pool_wait_seconds,
                        self._config.pool_size,
                    )
                    raise
                time.sleep(_POOL_RETRY_INTERVAL)

    def connect(self):
        try:
            conn = self._borrow()
        except mysql.connector.Error as e:
            logger.error("Database connection failed: %s", e)
            raise PersistenceError("Database connection failed") from e

        if self._config.time_zone:
            try:
                cur = conn.cursor()
                try:
                    cur.execute("SET time_zone = %s", (self._config.time_zone,))
                finally:
                    cur.close()
            except mysql.connector.Error as e:
                conn.close()
                logger.error("Could not set session time zone %s: %s", self._config.time_zone, e)
                raise PersistenceError("Database connection failed") from e
        return conn
