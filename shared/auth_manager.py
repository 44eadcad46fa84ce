"""
Authentication Manager for the Salesforce REST API

Exchanges the long-lived refresh token for a short-lived access token.
Nothing is cached: every pipeline run performs a fresh exchange.

Usage:
    from shared.auth_manager import Credentials, acquire_access_token

    creds = Credentials(client_id, client_secret, refresh_token, instance_url)
    access_token = acquire_access_token(creds)
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from shared.exceptions import AuthError, ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URL = "https://login.salesforce.com/services/oauth2/token"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class Credentials:
    """Connected-app credentials, loaded once and read many times"""

    client_id: str
    client_secret: str
    refresh_token: str
    instance_url: str

    # Field name -> environment variable it is loaded from
    ENV_NAMES = {
        'client_id': 'SF_CLIENT_ID',
        'client_secret': 'SF_CLIENT_SECRET',
        'refresh_token': 'SF_REFRESH_TOKEN',
        'instance_url': 'SF_INSTANCE_URL'
    }

    def missing_fields(self) -> List[str]:
        """Environment variable names of every empty credential"""
        return [
            env_name
            for field, env_name in self.ENV_NAMES.items()
            if not getattr(self, field)
        ]


def acquire_access_token(
    credentials: Credentials,
    token_url: str = DEFAULT_TOKEN_URL,
    timeout: float = DEFAULT_TIMEOUT
) -> str:
    """
    Exchange the refresh token for an access token.

    Args:
        credentials: Connected-app credentials
        token_url: OAuth2 token endpoint (production login by default)
        timeout: Request timeout in seconds

    Returns:
        str: Access token valid for this run only

    Raises:
        ConfigError: If any of the four credentials is missing
        AuthError: If Salesforce rejects the exchange or returns no token
    """
    missing = credentials.missing_fields()
    if missing:
        raise ConfigError(
            f"Missing Salesforce credentials in environment variables: {', '.join(missing)}"
        )

    data = {
        "grant_type": "refresh_token",
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "refresh_token": credentials.refresh_token
    }

    logger.info("Requesting Salesforce access token")
    response = requests.post(
        token_url,
        data=data,
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        timeout=timeout
    )

    if not response.ok:
        message = _error_description(response) or "Failed to authenticate with Salesforce"
        logger.error(f"Token exchange failed: {response.status_code} - {message}")
        raise AuthError(message)

    try:
        payload = response.json()
    except ValueError:
        raise AuthError("Salesforce token response was not valid JSON")

    access_token = payload.get("access_token") if isinstance(payload, dict) else None
    if not access_token:
        raise AuthError(
            _error_description(response) or "Salesforce token response did not include an access token"
        )

    logger.info("✓ Got access token")
    return access_token


def _error_description(response: requests.Response) -> Optional[str]:
    """Pull error_description out of an OAuth error body, if there is one"""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error_description")
    return None
