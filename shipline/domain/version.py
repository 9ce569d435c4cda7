"""
Version information derived from source control.

VersionInfo mirrors the subset of GitVersion's JSON output the
pipeline consumes (compile metadata, package version, release tag).
"""

from dataclasses import dataclass
from typing import Dict, Any

from ..exit_codes import ConfigError


@dataclass(frozen=True)
class VersionInfo:
    """Semantic version and source-control metadata for one run."""
    major: int
    minor: int
    patch: int
    major_minor_patch: str
    assembly_sem_file_ver: str
    informational_version: str
    nuget_version: str
    branch_name: str
    sha: str

    @property
    def assembly_version(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}.0"

    @property
    def release_tag(self) -> str:
        return f"v{self.major_minor_patch}"

    @classmethod
    def from_gitversion(cls, data: Dict[str, Any]) -> 'VersionInfo':
        """
        Create from GitVersion `/output json` data.

        Args:
            data: Parsed GitVersion JSON

        Returns:
            VersionInfo

        Raises:
            ConfigError: If a required variable is missing
        """
        try:
            major = int(data['Major'])
            minor = int(data['Minor'])
            patch = int(data['Patch'])
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"GitVersion output is missing version numbers: {e}") from e

        major_minor_patch = data.get('MajorMinorPatch') or f"{major}.{minor}.{patch}"
        # GitVersion 6 no longer emits NuGetVersion*
        nuget_version = (
            data.get('NuGetVersionV2')
            or data.get('NuGetVersion')
            or data.get('SemVer')
            or major_minor_patch
        )

        return cls(
            major=major,
            minor=minor,
            patch=patch,
            major_minor_patch=major_minor_patch,
            assembly_sem_file_ver=data.get('AssemblySemFileVer') or f"{major_minor_patch}.0",
            informational_version=data.get('InformationalVersion') or nuget_version,
            nuget_version=nuget_version,
            branch_name=data.get('BranchName', ''),
            sha=data.get('Sha', ''),
        )
