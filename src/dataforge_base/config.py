"""
Connection settings - what to connect to, loadable from YAML.

A settings file holds either a single connection:

    type: mysql
    host: db.example.com
    database: shop
    credential_id: shop-prod

or several named ones:

    connections:
      local:
        type: sqlite
        database: data/shop.db
      prod:
        type: mariadb
        host: db.example.com
        database: shop
        username: reader
"""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from .constants import DEFAULT_HOST
from .data_types import DatabaseType
from .utils.credential_manager import CredentialManager

import logging
logger = logging.getLogger(__name__)


@dataclass
class ConnectionSettings:
    """Connection configuration for one database."""
    database_type: DatabaseType
    database: str  # Database name on a server, or file path for SQLite
    host: str = DEFAULT_HOST
    port: Optional[int] = None
    username: str = ""
    password: str = field(default="", repr=False)
    credential_id: Optional[str] = None  # keyring entry holding username/password
    options: Dict[str, Any] = field(default_factory=dict)  # extra driver keyword arguments

    def __post_init__(self):
        self.database_type = DatabaseType.parse(self.database_type)
        if self.port is not None:
            self.port = int(self.port)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectionSettings":
        """
        Build settings from a plain mapping (e.g. parsed YAML).

        "type" is accepted as an alias of "database_type".

        Raises:
            ValueError: Unknown keys or missing required keys
        """
        data = dict(data)
        if "type" in data:
            data["database_type"] = data.pop("type")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown connection setting(s): {', '.join(sorted(unknown))}")
        missing = {"database_type", "database"} - set(data)
        if missing:
            raise ValueError(f"Missing connection setting(s): {', '.join(sorted(missing))}")

        return cls(**data)

    def resolve_credentials(self, username: Optional[str] = None,
                            password: Optional[str] = None) -> Tuple[str, str]:
        """
        Pick the credentials to log in with.

        Explicit arguments win, then the values stored in these settings,
        then the keyring entry named by credential_id.
        """
        user = username if username is not None else self.username
        secret = password if password is not None else self.password
        if not user and self.credential_id:
            stored_user, stored_secret = CredentialManager().lookup(self.credential_id)
            user = stored_user
            secret = secret or stored_secret
        return user or "", secret or ""


def load_connection_settings(path: Union[str, Path], name: Optional[str] = None) -> ConnectionSettings:
    """
    Load connection settings from a YAML file.

    Args:
        path: YAML file path
        name: Entry under "connections" to load; required when the file
            defines more than one connection

    Raises:
        ValueError: The file does not describe a connection, or the name is unknown
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")

    if "connections" not in data:
        if name is not None:
            raise ValueError(f"{path}: no 'connections' section, cannot select '{name}'")
        return ConnectionSettings.from_dict(data)

    connections = data["connections"] or {}
    if name is None:
        if len(connections) != 1:
            raise ValueError(f"{path}: {len(connections)} connections defined, pass a name")
        name = next(iter(connections))

    if name not in connections:
        raise ValueError(f"{path}: unknown connection '{name}'")

    logger.debug(f"Loaded connection settings '{name}' from {path}")
    return ConnectionSettings.from_dict(connections[name])
