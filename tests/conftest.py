"""Shared test configuration and fixtures for the shipline test suite."""

from unittest.mock import MagicMock

import pytest

from shipline.config import get_default_config
from shipline.context import BuildContext
from shipline.domain.build import Configuration, HostInfo
from shipline.domain.version import VersionInfo
from shipline.infra.dotnet_client import DotNetClient
from shipline.infra.git_client import GitClient, GitHubRepositoryInfo
from shipline.infra.github_client import GitHubClient
from shipline.services.notification_service import Notifier


SAMPLE_GITVERSION = {
    "Major": 2,
    "Minor": 1,
    "Patch": 0,
    "MajorMinorPatch": "2.1.0",
    "SemVer": "2.1.0-beta.3",
    "AssemblySemFileVer": "2.1.0.0",
    "InformationalVersion": "2.1.0-beta.3+Branch.main.Sha.abc123",
    "NuGetVersionV2": "2.1.0-beta0003",
    "BranchName": "main",
    "Sha": "abc123def456",
}

SAMPLE_CHANGELOG = """# Changelog

All notable changes to **Named Pipes Helper** are documented here.

## 2.1.0
- Added async server support
- Fixed handle leak on dispose

## 2.0.0
- Dropped netstandard1.x
"""


def make_version(branch: str = "main", **overrides) -> VersionInfo:
    data = dict(SAMPLE_GITVERSION, BranchName=branch)
    data.update(overrides)
    return VersionInfo.from_gitversion(data)


@pytest.fixture
def repo_root(tmp_path):
    """A repository root with a change-log and an empty output directory."""
    (tmp_path / "CHANGELOG.md").write_text(SAMPLE_CHANGELOG)
    (tmp_path / "output").mkdir()
    return tmp_path


@pytest.fixture
def make_context(repo_root):
    """Factory for BuildContext objects with mocked collaborators."""
    def factory(
        branch: str = "main",
        configuration: Configuration = Configuration.RELEASE,
        host: HostInfo = HostInfo(is_server_build=True, name="Jenkins"),
        secrets=None,
    ) -> BuildContext:
        git = MagicMock(spec=GitClient)
        git.github_repository.return_value = GitHubRepositoryInfo("dangl", "NamedPipes.Helper")
        settings = get_default_config()
        settings["project"]["name"] = "NamedPipes.Helper"
        return BuildContext(
            root=repo_root,
            configuration=configuration,
            host=host,
            version=make_version(branch),
            settings=settings,
            secrets=secrets if secrets is not None else {
                "feed_source": "https://feeds.example.com/v3/index.json",
                "feed_access_token": "feed-token",
                "nuget_api_key": "nuget-key",
                "github_token": "gh-token",
                "teams_webhook_url": "https://teams.example.com/webhook",
            },
            branch=branch,
            dotnet=MagicMock(spec=DotNetClient),
            git=git,
            github=MagicMock(spec=GitHubClient),
            notifier=MagicMock(spec=Notifier),
        )
    return factory
