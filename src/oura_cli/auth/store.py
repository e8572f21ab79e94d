"""
Credential storage module for oura-cli.

This module persists the single credential record as a JSON file in the
user's configuration directory. A missing file is an empty credential, not
an error.
"""
import json
import logging
import os
from pathlib import Path
from typing import Union

from oura_cli.auth.exceptions import ConfigStoreError
from oura_cli.auth.models import Credential

# Configure logger
logger = logging.getLogger(__name__)


class ConfigStore:
    """
    JSON file storage for the credential record.

    The file holds ``client_id``, ``client_secret``, ``access_token``,
    ``refresh_token`` and ``expiry`` (ISO-8601). There is no cross-process
    locking; concurrent invocations against the same file may race.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize the config store.

        Args:
            path: Path to the JSON credential file
        """
        self.path = Path(path)

    def load(self) -> Credential:
        """
        Load the credential record.

        Returns:
            The stored credential, or an all-empty one if the file is absent

        Raises:
            ConfigStoreError: If the file exists but cannot be read or parsed
        """
        if not self.path.exists():
            logger.debug(f"No credential file at {self.path}")
            return Credential()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                record = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigStoreError(f"Error reading credential file {self.path}: {e}", e)

        if not isinstance(record, dict):
            raise ConfigStoreError(f"Credential file {self.path} does not contain a JSON object")

        try:
            return Credential.from_record(record)
        except ValueError as e:
            raise ConfigStoreError(f"Invalid credential file {self.path}: {e}", e)

    def save(self, credential: Credential) -> None:
        """
        Write the credential record, replacing any previous one.

        Raises:
            ConfigStoreError: If the file cannot be written
        """
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Only the user may read the secrets, from the first byte written
            fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                os.chmod(temp_path, 0o600)
                json.dump(credential.to_record(), f, indent=2)
            os.replace(temp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            temp_path.unlink(missing_ok=True)
            raise ConfigStoreError(f"Error writing credential file {self.path}: {e}", e)

        logger.debug(f"Saved credentials to {self.path}")
