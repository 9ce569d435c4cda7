"""
Build context for shipline.

BuildContext is created once at process start and handed to every
target: it carries the resolved configuration, version, secrets and
the collaborator clients, so targets never read ambient state.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .domain.build import Configuration, HostInfo
from .domain.version import VersionInfo
from .exit_codes import ConfigError
from .infra.dotnet_client import DotNetClient
from .infra.git_client import GitClient
from .infra.github_client import GitHubClient
from .services.notification_service import Notifier

logger = logging.getLogger(__name__)

PACKAGE_PATTERN = "*.nupkg"
SYMBOLS_SUFFIX = "symbols.nupkg"


@dataclass
class BuildContext:
    """Everything a target needs for one run."""
    root: Path
    configuration: Configuration
    host: HostInfo
    version: VersionInfo
    settings: Dict[str, Any]
    secrets: Dict[str, str] = field(default_factory=dict)
    branch: Optional[str] = None
    dotnet: Optional[DotNetClient] = None
    git: Optional[GitClient] = None
    github: Optional[GitHubClient] = None
    notifier: Optional[Notifier] = None

    def __post_init__(self):
        self.root = Path(self.root)
        if self.dotnet is None:
            tools = self.settings.get('tools', {})
            self.dotnet = DotNetClient(
                tools.get('dotnet', 'dotnet'),
                cwd=self.root,
                timeout=tools.get('timeout_seconds') or None,
            )
        if self.git is None:
            self.git = GitClient()
        if self.notifier is None:
            self.notifier = Notifier(self.secret('teams_webhook_url'))

    @property
    def project(self) -> Dict[str, Any]:
        return self.settings.get('project', {})

    @property
    def product_name(self) -> str:
        return self.project.get('name') or self.root.name

    @property
    def output_dir(self) -> Path:
        return self.root / self.project.get('output_dir', 'output')

    @property
    def changelog_file(self) -> Path:
        return self.root / self.project.get('changelog', 'CHANGELOG.md')

    @property
    def clean_roots(self) -> List[Path]:
        return [self.root / self.project.get('project_dir', 'src'),
                self.root / self.project.get('test_dir', 'test')]

    @property
    def main_branches(self) -> List[str]:
        branches = self.settings.get('git', {}).get('main_branches', ['main', 'origin/main'])
        if not isinstance(branches, (list, tuple)):
            raise ConfigError(f"git.main_branches must be a list of branch names, got {branches!r}")
        return list(branches)

    @property
    def remote(self) -> str:
        return self.settings.get('git', {}).get('remote', 'origin')

    @property
    def public_feed(self) -> str:
        return self.settings.get('feeds', {}).get('public_source', 'https://api.nuget.org/v3/index.json')

    @property
    def is_main_branch(self) -> bool:
        return self.version.branch_name in self.main_branches

    @property
    def display_branch(self) -> str:
        return self.branch or self.version.branch_name or "(unknown)"

    def secret(self, name: str) -> str:
        return (self.secrets.get(name) or "").strip()

    def has_secret(self, name: str) -> bool:
        return bool(self.secret(name))

    def packages(self, include_symbols: bool = True) -> List[str]:
        """Package files in the output directory, sorted by name."""
        if not self.output_dir.is_dir():
            return []
        paths = sorted(str(p) for p in self.output_dir.glob(PACKAGE_PATTERN) if p.is_file())
        if not include_symbols:
            paths = [p for p in paths if not p.endswith(SYMBOLS_SUFFIX)]
        return paths

    def github_client(self) -> GitHubClient:
        if self.github is None:
            self.github = GitHubClient(self.secret('github_token'))
        return self.github
