"""
Credential Manager - Database logins kept in the system keyring

Each credential id owns two keyring entries under one service name:

    <credential id>               -> username
    <credential id>/<username>    -> password

so a settings file only needs to name the credential id:

    manager = CredentialManager()
    manager.store("shop-prod", "bob", "secret")
    username, password = manager.lookup("shop-prod")
"""

import logging
from typing import NamedTuple

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "dataforge-base"


class Credentials(NamedTuple):
    username: str = ""
    password: str = ""


class CredentialManager:
    """Store, look up and forget logins by credential id."""

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME):
        self.service_name = service_name

    @staticmethod
    def _password_key(credential_id: str, username: str) -> str:
        return f"{credential_id}/{username}"

    def store(self, credential_id: str, username: str, password: str) -> bool:
        """
        Save a login, replacing any login stored under the same id.

        Returns:
            True if saved, False if the keyring backend refused
        """
        try:
            previous = keyring.get_password(self.service_name, credential_id)
            keyring.set_password(self.service_name, self._password_key(credential_id, username), password)
            keyring.set_password(self.service_name, credential_id, username)
            if previous and previous != username:
                keyring.delete_password(self.service_name, self._password_key(credential_id, previous))
        except PasswordDeleteError:
            logger.debug(f"Stale password for {credential_id} was already gone")
        except KeyringError as e:
            logger.error(f"Failed to store credentials for {credential_id}: {e}")
            return False
        logger.info(f"Credentials stored for {credential_id}")
        return True

    def lookup(self, credential_id: str) -> Credentials:
        """Return the stored login, or empty credentials when none is available."""
        try:
            username = keyring.get_password(self.service_name, credential_id)
            if not username:
                logger.debug(f"No stored credentials for {credential_id}")
                return Credentials()
            password = keyring.get_password(self.service_name, self._password_key(credential_id, username))
        except KeyringError as e:
            logger.error(f"Failed to read credentials for {credential_id}: {e}")
            return Credentials()
        return Credentials(username, password or "")

    def has_credentials(self, credential_id: str) -> bool:
        return bool(self.lookup(credential_id).username)

    def forget(self, credential_id: str) -> bool:
        """
        Remove a stored login.

        Returns:
            True if a login was removed, False if there was none or the backend failed
        """
        try:
            username = keyring.get_password(self.service_name, credential_id)
            if not username:
                return False
            keyring.delete_password(self.service_name, self._password_key(credential_id, username))
            keyring.delete_password(self.service_name, credential_id)
        except PasswordDeleteError:
            logger.debug(f"Credentials for {credential_id} were partially missing")
            return False
        except KeyringError as e:
            logger.error(f"Failed to remove credentials for {credential_id}: {e}")
            return False
        logger.info(f"Credentials removed for {credential_id}")
        return True
