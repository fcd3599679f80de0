"""
Operator credentials: GitHub username, commit email and access token.
"""

import yaml
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from ..error_handling import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIALS_FILE = "config.yaml"


@dataclass(frozen=True)
class Credentials:
    """
    Identity used to fork, commit and push.

    Loaded once at startup and handed to every component that talks to
    GitHub or signs a commit. The token is kept out of ``repr``.
    """

    username: str
    email: str
    token: str = field(repr=False)

    REQUIRED_FIELDS = ("username", "email", "token")


def load_credentials(path: Union[str, Path] = DEFAULT_CREDENTIALS_FILE) -> Credentials:
    """
    Load credentials from a YAML file with a strict schema.

    The document must be a mapping holding exactly ``username``, ``email``
    and ``token``, each a non-empty string.

    Args:
        path: Path to the credentials file

    Returns:
        Loaded credentials

    Raises:
        ConfigurationError: If the file is missing, unreadable or does not match the schema
    """
    config_path = Path(path)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read credentials file {config_path}",
            config_path=str(config_path),
            cause=e
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in credentials file {config_path}",
            config_path=str(config_path),
            cause=e
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Credentials file must contain a mapping with username, email and token",
            config_path=str(config_path)
        )

    unknown = sorted(str(key) for key in data if key not in Credentials.REQUIRED_FIELDS)
    if unknown:
        raise ConfigurationError(
            f"Unknown fields in credentials file: {', '.join(unknown)}",
            config_path=str(config_path)
        )

    missing = [name for name in Credentials.REQUIRED_FIELDS if name not in data]
    if missing:
        raise ConfigurationError(
            f"Missing fields in credentials file: {', '.join(missing)}",
            config_path=str(config_path)
        )

    for name in Credentials.REQUIRED_FIELDS:
        value = data[name]
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(
                f"Field '{name}' must be a non-empty string",
                config_path=str(config_path)
            )

    logger.info(f"Loaded credentials for {data['username']} from {config_path}")
    return Credentials(username=data["username"], email=data["email"], token=data["token"])
