"""
Secret resolution for shipline.

Produces a plain name -> value mapping once per run. Precedence for
each secret: explicit CLI value, then config file / SHIPLINE_SECRETS_*
environment, then Azure Key Vault (when fully configured), else empty.
"""

import logging
from typing import Callable, Dict, Any, Mapping, Optional

from ..config import SECRET_KEYS
from ..infra.keyvault_client import KeyVaultClient, KeyVaultSettings

logger = logging.getLogger(__name__)


def key_vault_settings(config: Dict[str, Any], overrides: Optional[Mapping[str, Optional[str]]] = None) -> KeyVaultSettings:
    """Build vault settings from config, letting non-empty overrides win."""
    vault = dict(config.get('key_vault', {}))
    for key, value in (overrides or {}).items():
        if value:
            vault[key] = value
    return KeyVaultSettings(
        base_url=str(vault.get('base_url') or ''),
        client_id=str(vault.get('client_id') or ''),
        client_secret=str(vault.get('client_secret') or ''),
        tenant_id=str(vault.get('tenant_id') or ''),
    )


def resolve_secrets(
    config: Dict[str, Any],
    cli_values: Optional[Mapping[str, Optional[str]]] = None,
    vault_settings: Optional[KeyVaultSettings] = None,
    client_factory: Callable[[KeyVaultSettings], KeyVaultClient] = KeyVaultClient,
) -> Dict[str, str]:
    """
    Resolve every secret parameter.

    Args:
        config: Loaded configuration (secrets and key_vault sections)
        cli_values: Values given on the command line (None/empty = not given)
        vault_settings: Key Vault connection; defaults to the config's
        client_factory: Creates the KeyVaultClient (injectable for tests)

    Returns:
        Dict with one entry per name in SECRET_KEYS; missing ones are ""
    """
    cli_values = cli_values or {}
    configured = config.get('secrets', {})
    secrets: Dict[str, str] = {}

    for key in SECRET_KEYS:
        value = cli_values.get(key) or configured.get(key) or ""
        secrets[key] = str(value)

    missing = [key for key, value in secrets.items() if not value]
    if not missing:
        return secrets

    settings = vault_settings or key_vault_settings(config)
    if not settings.is_complete:
        logger.debug(f"Key Vault not configured; unresolved secrets: {', '.join(missing)}")
        return secrets

    client = client_factory(settings)
    names = config.get('key_vault', {}).get('secret_names', {})
    for key in missing:
        vault_name = names.get(key)
        if not vault_name:
            continue
        value = client.get_secret(vault_name)
        if value:
            secrets[key] = value
            logger.debug(f"Resolved '{key}' from Key Vault secret '{vault_name}'")

    return secrets
