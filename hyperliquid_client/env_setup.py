"""Environment configuration setup utilities.

This module provides functions for loading environment variables from .env files
and configuring the client for local development.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from hyperliquid_client.errors import (
    InvalidPrivateKeyError,
    MissingCredentialsError,
    ValidationError,
)
from hyperliquid_client.helpers import default_api_url
from hyperliquid_client.signing.primitives import is_valid_private_key
from hyperliquid_client.types import Address

log = logging.getLogger(__name__)

ENVIRONMENTS = ("mainnet", "testnet")


@dataclass(frozen=True)
class EnvironmentConfig:
    """Client settings read from the environment."""

    environment: str
    api_url: str
    private_key: str
    vault_address: Address | None = None
    multi_sig_user: Address | None = None

    @property
    def is_testnet(self) -> bool:
        return self.environment == "testnet"

    def __repr__(self) -> str:
        return (
            f"EnvironmentConfig(environment={self.environment!r}, "
            f"api_url={self.api_url!r}, vault_address={self.vault_address!r}, "
            f"multi_sig_user={self.multi_sig_user!r})"
        )


def setup_environment(env_file: str | Path = ".env") -> EnvironmentConfig:
    """Load the client configuration from the environment.

    Loads environment variables from a .env file if present, otherwise falls
    back to system environment variables. Reads environment-specific variables
    based on the ENVIRONMENT variable (defaults to 'mainnet'):

    - ``HYPERLIQUID_PRIVATE_KEY_<ENV>`` (required)
    - ``HYPERLIQUID_API_URL_<ENV>``
    - ``HYPERLIQUID_VAULT_ADDRESS_<ENV>``
    - ``HYPERLIQUID_MULTI_SIG_USER_<ENV>``

    Args:
        env_file: Path of the .env file to load.

    Returns:
        The parsed configuration.

    Raises:
        ValidationError: If ENVIRONMENT names an unknown network.
        MissingCredentialsError: If the private key is not set.
        InvalidPrivateKeyError: If the private key is malformed.

    """
    env_file_path = Path(env_file)
    if env_file_path.exists():
        log.info("Loading environment variables from %s", env_file_path)
        load_dotenv(env_file_path)
    else:
        log.info("%s not found. Falling back to shell environment variables.", env_file_path)

    environment = os.getenv("ENVIRONMENT", "mainnet").lower()
    if environment not in ENVIRONMENTS:
        raise ValidationError(
            f"ENVIRONMENT must be one of {', '.join(ENVIRONMENTS)}, got {environment!r}"
        )
    log.info("Using %s environment", environment)

    suffix = environment.upper()
    private_key = os.environ.get(f"HYPERLIQUID_PRIVATE_KEY_{suffix}")
    if not private_key:
        raise MissingCredentialsError(f"HYPERLIQUID_PRIVATE_KEY_{suffix}")
    if not is_valid_private_key(private_key):
        raise InvalidPrivateKeyError(
            f"HYPERLIQUID_PRIVATE_KEY_{suffix} is not a valid private key"
        )

    return EnvironmentConfig(
        environment=environment,
        api_url=os.environ.get(
            f"HYPERLIQUID_API_URL_{suffix}", default_api_url(environment == "testnet")
        ),
        private_key=private_key,
        vault_address=os.environ.get(f"HYPERLIQUID_VAULT_ADDRESS_{suffix}") or None,
        multi_sig_user=os.environ.get(f"HYPERLIQUID_MULTI_SIG_USER_{suffix}") or None,
    )
