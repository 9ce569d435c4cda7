"""
Build mode and host domain objects for shipline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

# Environment variables whose presence marks a CI server build
SERVER_BUILD_VARIABLES = {
    'JENKINS_URL': 'Jenkins',
    'TF_BUILD': 'Azure Pipelines',
    'GITHUB_ACTIONS': 'GitHub Actions',
    'GITLAB_CI': 'GitLab CI',
    'TEAMCITY_VERSION': 'TeamCity',
    'CI': 'CI',
}


class Configuration(Enum):
    """Build configuration passed to the compiler."""
    DEBUG = "Debug"
    RELEASE = "Release"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> 'Configuration':
        """Parse a configuration name case-insensitively."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Unknown configuration '{value}' (expected Debug or Release)")

    @classmethod
    def default_for(cls, is_server_build: bool) -> 'Configuration':
        return cls.RELEASE if is_server_build else cls.DEBUG


@dataclass(frozen=True)
class HostInfo:
    """Where the pipeline is running."""
    is_server_build: bool = False
    is_pull_request: bool = False
    name: str = "Terminal"

    @property
    def is_local_build(self) -> bool:
        return not self.is_server_build


def detect_host(environ: Mapping[str, str]) -> HostInfo:
    """
    Detect the build host from environment variables.

    Args:
        environ: Environment mapping (usually os.environ)

    Returns:
        HostInfo; pull-request builds are detected via Jenkins' CHANGE_ID
    """
    name: Optional[str] = None
    for variable, host_name in SERVER_BUILD_VARIABLES.items():
        if environ.get(variable):
            name = host_name
            break

    if name is None:
        return HostInfo()

    return HostInfo(
        is_server_build=True,
        is_pull_request=bool(environ.get('CHANGE_ID')),
        name=name,
    )
