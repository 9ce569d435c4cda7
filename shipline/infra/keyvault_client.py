"""
Azure Key Vault client infrastructure for shipline.

Reads secrets through the Key Vault REST API using an Azure AD
service principal (OAuth2 client-credentials flow).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import requests

from ..exit_codes import APIError

logger = logging.getLogger(__name__)

AZURE_LOGIN_BASE = "https://login.microsoftonline.com"
KEY_VAULT_SCOPE = "https://vault.azure.net/.default"
KEY_VAULT_API_VERSION = "7.4"


@dataclass(frozen=True)
class KeyVaultSettings:
    """Connection parameters for one vault."""
    base_url: str
    client_id: str
    client_secret: str = field(repr=False)
    tenant_id: str

    @property
    def is_complete(self) -> bool:
        return all(v.strip() for v in (self.base_url, self.client_id, self.client_secret, self.tenant_id))


class KeyVaultClient:
    """
    Client for reading Key Vault secrets.

    The access token is fetched on first use and reused for the run.

    Example:
        client = KeyVaultClient(KeyVaultSettings(url, client_id, secret, tenant))
        value = client.get_secret("NuGetApiKey")
    """

    def __init__(self, settings: KeyVaultSettings, timeout: int = 30):
        self.settings = settings
        self.timeout = timeout
        self.session = requests.Session()
        self._access_token: Optional[str] = None

    def _get_access_token(self) -> str:
        if self._access_token:
            return self._access_token

        url = f"{AZURE_LOGIN_BASE}/{self.settings.tenant_id}/oauth2/v2.0/token"
        data = {
            'grant_type': 'client_credentials',
            'client_id': self.settings.client_id,
            'client_secret': self.settings.client_secret,
            'scope': KEY_VAULT_SCOPE,
        }
        try:
            response = self.session.post(url, data=data, timeout=self.timeout)
            response.raise_for_status()
            self._access_token = response.json()['access_token']
        except requests.RequestException as e:
            raise APIError(f"Azure AD token request failed: {e}") from e
        except (ValueError, KeyError) as e:
            raise APIError(f"Azure AD token response was malformed: {e}") from e

        return self._access_token

    def get_secret(self, name: str) -> Optional[str]:
        """
        Get a secret's current value.

        Returns:
            The value, or None if the vault has no such secret

        Raises:
            APIError: On authentication or transport failure
        """
        token = self._get_access_token()
        url = f"{self.settings.base_url.rstrip('/')}/secrets/{name}"
        try:
            response = self.session.get(
                url,
                params={'api-version': KEY_VAULT_API_VERSION},
                headers={'Authorization': f'Bearer {token}'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise APIError(f"Key Vault request failed for secret '{name}': {e}") from e

        if response.status_code == 404:
            logger.debug(f"Secret '{name}' not found in Key Vault")
            return None

        try:
            response.raise_for_status()
            return response.json().get('value')
        except requests.RequestException as e:
            raise APIError(f"Key Vault error for secret '{name}': {e}", status_code=response.status_code) from e
        except ValueError as e:
            raise APIError(f"Key Vault returned invalid JSON for secret '{name}': {e}") from e
