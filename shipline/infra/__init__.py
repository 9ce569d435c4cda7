"""
Infrastructure layer for shipline.

Contains abstractions for external systems:
- DotNetClient: dotnet CLI (restore, build, pack, nuget push)
- GitClient: Git command execution
- GitVersionClient: Semantic version computation
- GitHubClient: GitHub release publishing
- TeamsClient: Teams webhook messages
- KeyVaultClient: Azure Key Vault secrets

These provide clean interfaces that can be mocked for testing.
"""

from .dotnet_client import (
    DotNetClient,
    DotNetRestoreSettings,
    DotNetBuildSettings,
    DotNetPackSettings,
    DotNetNuGetPushSettings,
)
from .git_client import GitClient, GitHubRepositoryInfo, parse_github_remote
from .gitversion_client import GitVersionClient
from .github_client import GitHubClient, GitHubRelease, GitHubReleaseSettings
from .teams_client import TeamsClient
from .keyvault_client import KeyVaultClient, KeyVaultSettings

__all__ = [
    'DotNetClient',
    'DotNetRestoreSettings',
    'DotNetBuildSettings',
    'DotNetPackSettings',
    'DotNetNuGetPushSettings',
    'GitClient',
    'GitHubRepositoryInfo',
    'parse_github_remote',
    'GitVersionClient',
    'GitHubClient',
    'GitHubRelease',
    'GitHubReleaseSettings',
    'TeamsClient',
    'KeyVaultClient',
    'KeyVaultSettings',
]
