"""
MySQL Dialect - MySQL and MariaDB specific SQL operations

Both servers are reached through PyMySQL.
"""

from typing import Any, Dict

from ..constants import CONNECTION_TIMEOUT_S, MYSQL_DEFAULT_CHARSET, MYSQL_DEFAULT_PORT
from ..data_types import DatabaseType
from .base import DatabaseDialect

import logging
logger = logging.getLogger(__name__)


class MySQLDialect(DatabaseDialect):
    """Dialect for MySQL databases."""

    @property
    def database_type(self) -> DatabaseType:
        return DatabaseType.MYSQL

    @property
    def driver_module(self) -> str:
        return "pymysql"

    @property
    def paramstyle(self) -> str:
        return "format"

    @property
    def auto_increment_keyword(self) -> str:
        return "AUTO_INCREMENT"

    @property
    def unique_key_keyword(self) -> str:
        return "UNIQUE KEY"

    def escape_string(self, text: str) -> str:
        """MySQL accepts backslash escapes inside string literals."""
        return text.replace("\\", "\\\\").replace("'", "\\'")

    def connect_kwargs(self, settings, username: str, password: str) -> Dict[str, Any]:
        kwargs = {
            "host": settings.host,
            "port": settings.port or MYSQL_DEFAULT_PORT,
            "user": username,
            "password": password,
            "database": settings.database or None,
            "charset": MYSQL_DEFAULT_CHARSET,
            "connect_timeout": CONNECTION_TIMEOUT_S,
            "autocommit": True,
        }
        kwargs.update(settings.options)
        return kwargs

    def ping(self, raw_connection: Any, timeout: float) -> bool:
        """
        Ping the server without reconnecting, bounded by ``timeout`` seconds.

        PyMySQL applies its read/write timeouts to the socket before every
        transfer, so they are lowered for the duration of the ping and put
        back afterwards. Queries keep the timeouts chosen at connect time.
        """
        driver = self.load_driver()
        previous = (raw_connection._read_timeout, raw_connection._write_timeout)
        raw_connection._read_timeout = raw_connection._write_timeout = timeout
        try:
            raw_connection.ping(reconnect=False)
            return True
        except driver.Error as e:
            logger.warning(f"{self.database_type} ping failed: {e}")
            return False
        finally:
            raw_connection._read_timeout, raw_connection._write_timeout = previous

    def list_tables_query(self) -> str:
        return (
            "SELECT TABLE_NAME FROM information_schema.TABLES "
            "WHERE TABLE_SCHEMA = DATABASE() AND TABLE_NAME LIKE ?"
        )


class MariaDBDialect(MySQLDialect):
    """Dialect for MariaDB databases; adds CREATE OR REPLACE TABLE."""

    @property
    def database_type(self) -> DatabaseType:
        return DatabaseType.MARIADB

    @property
    def supports_or_replace(self) -> bool:
        return True
