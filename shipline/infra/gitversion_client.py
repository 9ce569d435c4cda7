"""
GitVersion client infrastructure for shipline.

Runs the GitVersion tool with JSON output and turns the result into
a VersionInfo. The semantic version computation itself stays inside
GitVersion.
"""

import json
import logging
import shlex
import subprocess
from pathlib import Path
from typing import List, Union

from ..domain.version import VersionInfo
from ..exit_codes import ToolError, ConfigError

logger = logging.getLogger(__name__)


class GitVersionClient:
    """
    Computes version information for a repository.

    Example:
        client = GitVersionClient(["dotnet-gitversion"])
        version = client.get_version("/path/to/repo")
        print(version.nuget_version)
    """

    def __init__(self, command: Union[str, List[str]] = "dotnet-gitversion", timeout: int = 120):
        """
        Initialize GitVersionClient.

        Args:
            command: GitVersion executable, as a string or argument list
                     (e.g. ["dotnet", "gitversion"])
            timeout: Command timeout in seconds
        """
        self.command = shlex.split(command) if isinstance(command, str) else list(command)
        self.timeout = timeout

    def get_version(self, path: Union[str, Path]) -> VersionInfo:
        """
        Run GitVersion in a repository.

        Raises:
            ToolError: If GitVersion cannot be run or exits non-zero
            ConfigError: If its output is not valid version JSON
        """
        cmd = self.command + [str(path), '/output', 'json']
        tool = ' '.join(self.command)
        logger.debug(f"> {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError as e:
            raise ToolError(tool, 127, f"executable not found ({e})") from e
        except subprocess.TimeoutExpired as e:
            raise ToolError(tool, -1, f"timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise ToolError(tool, result.returncode, result.stderr or result.stdout)

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ConfigError(f"GitVersion returned invalid JSON: {e}") from e

        version = VersionInfo.from_gitversion(data)
        logger.info(f"Version {version.nuget_version} on branch {version.branch_name or '(unknown)'}")
        return version
