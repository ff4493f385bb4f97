"""
Connection Error Handler - Readable database connection error messages

Translates driver error messages into short explanations with
suggestions for resolution. Used when building ConnectionFailedError.
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

import logging
logger = logging.getLogger(__name__)


@dataclass
class ConnectionErrorInfo:
    """Structured connection error information."""
    title: str  # Short error title
    message: str  # Readable message
    suggestion: str  # What to do to fix it
    original_error: str  # Original error for debugging

    def format_full(self) -> str:
        """Format complete error message for display."""
        parts = [self.title, "", self.message]
        if self.suggestion:
            parts.extend(["", "Suggestion:", self.suggestion])
        return "\n".join(parts)

    def format_short(self) -> str:
        """Format short error message."""
        return f"{self.title}: {self.message}"


# Format: (regex_pattern, title, message_template, suggestion)
# Use {match} in message_template to include regex group(1)
Pattern = Tuple[str, str, str, str]

MYSQL_PATTERNS: List[Pattern] = [
    (
        r"access denied for user ['\"]?([\w.-]+)['\"]?",
        "Authentication failed",
        "User '{match}' could not log in.",
        "Check the username and password, and that the user may connect from this host."
    ),
    (
        r"unknown database ['\"]?([\w.-]+)['\"]?",
        "Unknown database",
        "Database '{match}' does not exist on the server.",
        "Check the database name or create it first."
    ),
    (
        r"can't connect to mysql server on ['\"]?([\w.:-]+)['\"]?",
        "Server unreachable",
        "Could not reach the server '{match}'.",
        "Check that the server is running, listens on the expected port (default 3306) "
        "and that no firewall blocks the connection."
    ),
    (
        r"(?:timed out|timeout)",
        "Connection timed out",
        "The server did not answer in time.",
        "Check the network connection and the server load."
    ),
]

SQLITE_PATTERNS: List[Pattern] = [
    (
        r"unable to open database file",
        "File not accessible",
        "The SQLite database file could not be opened or created.",
        "Check that the parent folder exists and is writable."
    ),
    (
        r"database is locked",
        "Database locked",
        "The database is in use by another process.",
        "Close other applications using this file, or wait a moment."
    ),
    (
        r"(?:read-only|readonly)",
        "Read-only database",
        "The database cannot be written to.",
        "Check the permissions of the file and of its folder."
    ),
    (
        r"(?:not a database|corrupt|malformed)",
        "Corrupt database",
        "The file does not look like a valid SQLite database.",
        "Restore a backup or run 'PRAGMA integrity_check'."
    ),
]

GENERIC_PATTERNS: List[Pattern] = [
    (
        r"(?:connection refused|actively refused)",
        "Connection refused",
        "The server refused the connection.",
        "Check that the database server is running."
    ),
    (
        r"(?:name or service not known|nodename nor servname|getaddrinfo failed)",
        "Host not found",
        "The server name could not be resolved.",
        "Check the host name or IP address."
    ),
]


def _patterns_for(database_type: str) -> List[Pattern]:
    if database_type in ("mysql", "mariadb"):
        return MYSQL_PATTERNS + GENERIC_PATTERNS
    if database_type == "sqlite":
        return SQLITE_PATTERNS + GENERIC_PATTERNS
    return MYSQL_PATTERNS + SQLITE_PATTERNS + GENERIC_PATTERNS


def parse_connection_error(error: Exception, database_type: str = "") -> ConnectionErrorInfo:
    """
    Parse a database connection error and return readable information.

    Args:
        error: The exception raised by the driver
        database_type: Database type value (mysql, mariadb, sqlite)

    Returns:
        ConnectionErrorInfo with message and suggestion
    """
    error_str = str(error)

    for pattern, title, message_template, suggestion in _patterns_for(database_type):
        match = re.search(pattern, error_str, re.IGNORECASE)
        if match:
            message = message_template
            if "{match}" in message and match.groups():
                message = message.replace("{match}", match.group(1))

            return ConnectionErrorInfo(
                title=title,
                message=message,
                suggestion=suggestion,
                original_error=error_str
            )

    logger.debug(f"No connection error pattern matched: {error_str}")
    return ConnectionErrorInfo(
        title="Connection error",
        message="An error occurred while connecting to the database.",
        suggestion="Check the connection settings and try again.",
        original_error=error_str
    )
