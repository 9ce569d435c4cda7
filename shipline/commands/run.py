"""
Handles the 'run' command: execute pipeline targets.

    shipline run                      # Clean, Restore, Compile
    shipline run Push --configuration Release
    shipline run Pack --skip Clean
"""

import logging
import os
from pathlib import Path

import click

from ..config import load_config, setup_logging
from ..exit_codes import ConfigError
from ..context import BuildContext
from ..cli_utils import standard_command, add_common_options
from ..domain.build import Configuration, detect_host
from ..infra.git_client import GitClient
from ..infra.gitversion_client import GitVersionClient
from ..pipeline import DEFAULT_TARGET, create_targets, failure_notifier
from ..render import render_summary
from ..services.runner import TargetRunner
from ..services.secrets import key_vault_settings, resolve_secrets

logger = logging.getLogger(__name__)


def resolve_configuration(option, config, host) -> Configuration:
    """CLI option, then config/env, then Debug locally / Release on a server."""
    value = option or config.get('parameters', {}).get('configuration')
    if value:
        try:
            return Configuration.parse(str(value))
        except ValueError as e:
            raise ConfigError(f"Invalid parameters.configuration: {e}") from e
    return Configuration.default_for(host.is_server_build)


@click.command(name='run')
@click.argument('targets', nargs=-1)
@click.option('-c', '--configuration', type=click.Choice(['Debug', 'Release'], case_sensitive=False),
              default=None, help="Build configuration (default: Debug locally, Release on a server)")
@click.option('--feed-source', default=None, help='Package feed URL for Push')
@click.option('--feed-access-token', default=None, help='API key for the package feed')
@click.option('--nuget-api-key', default=None, help='API key for nuget.org')
@click.option('--github-token', default=None, help='Token for publishing GitHub releases')
@click.option('--teams-webhook-url', default=None, help='Teams webhook for notifications')
@click.option('--key-vault-base-url', default=None, help='Azure Key Vault URL for resolving secrets')
@click.option('--key-vault-client-id', default=None, help='Azure AD client id for Key Vault')
@click.option('--key-vault-client-secret', default=None, help='Azure AD client secret for Key Vault')
@click.option('--key-vault-tenant-id', default=None, help='Azure AD tenant id for Key Vault')
@add_common_options('root', 'skip', 'verbose')
@standard_command
def run_handler(targets, configuration, feed_source, feed_access_token, nuget_api_key,
                github_token, teams_webhook_url, key_vault_base_url, key_vault_client_id,
                key_vault_client_secret, key_vault_tenant_id, root, skip, verbose):
    """Run pipeline targets and their dependencies.

    TARGETS: Target names (default: Compile)

    \b
    Each dependency runs once, in order; the run stops at the first
    failure. Secrets may also come from the config file, from
    SHIPLINE_SECRETS_* environment variables or from Azure Key Vault.
    """
    root_dir = Path(root or os.getcwd()).resolve()
    config = load_config(root_dir)
    setup_logging('DEBUG' if verbose else config['logging']['level'], config['logging']['format'])

    requested = list(targets) or [DEFAULT_TARGET]
    pipeline_targets = create_targets()
    # Validate target names before touching any external tool
    TargetRunner(pipeline_targets).plan(requested + list(skip))

    host = detect_host(os.environ)
    build_configuration = resolve_configuration(configuration, config, host)
    logger.info(f"Host: {host.name}, configuration: {build_configuration}")

    secrets = resolve_secrets(
        config,
        cli_values={
            'feed_source': feed_source,
            'feed_access_token': feed_access_token,
            'nuget_api_key': nuget_api_key,
            'github_token': github_token,
            'teams_webhook_url': teams_webhook_url,
        },
        vault_settings=key_vault_settings(config, {
            'base_url': key_vault_base_url,
            'client_id': key_vault_client_id,
            'client_secret': key_vault_client_secret,
            'tenant_id': key_vault_tenant_id,
        }),
    )

    tools = config.get('tools', {})
    version = GitVersionClient(tools.get('gitversion', 'dotnet-gitversion')).get_version(root_dir)
    git = GitClient()

    context = BuildContext(
        root=root_dir,
        configuration=build_configuration,
        host=host,
        version=version,
        settings=config,
        secrets=secrets,
        branch=git.current_branch(str(root_dir)),
        git=git,
    )

    runner = TargetRunner(pipeline_targets, on_target_failed=failure_notifier(context))
    try:
        runner.run(context, requested, skip=skip)
    finally:
        if runner.last_summary is not None:
            render_summary(runner.last_summary, version.nuget_version)
