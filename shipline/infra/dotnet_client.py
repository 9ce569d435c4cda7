"""
dotnet CLI client infrastructure for shipline.

Each dotnet invocation has a plain settings dataclass that renders
to an argument list. DotNetClient runs them and raises ToolError on
failure, so a broken build stops the pipeline.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Union

from ..exit_codes import ToolError

logger = logging.getLogger(__name__)

MASK = '***'


@dataclass
class DotNetRestoreSettings:
    """Options for `dotnet restore`."""
    project: Optional[str] = None

    def to_args(self) -> List[str]:
        args = ['restore']
        if self.project:
            args.append(self.project)
        return args


@dataclass
class DotNetBuildSettings:
    """Options for `dotnet build`."""
    configuration: str = "Debug"
    project: Optional[str] = None
    no_restore: bool = True
    node_reuse: bool = False
    file_version: Optional[str] = None
    assembly_version: Optional[str] = None
    informational_version: Optional[str] = None

    def to_args(self) -> List[str]:
        args = ['build']
        if self.project:
            args.append(self.project)
        args += ['--configuration', self.configuration]
        if self.no_restore:
            args.append('--no-restore')
        if not self.node_reuse:
            args.append('-nodereuse:false')
        if self.file_version:
            args.append(f'-p:FileVersion={self.file_version}')
        if self.assembly_version:
            args.append(f'-p:AssemblyVersion={self.assembly_version}')
        if self.informational_version:
            args.append(f'-p:InformationalVersion={self.informational_version}')
        return args


@dataclass
class DotNetPackSettings:
    """Options for `dotnet pack`."""
    configuration: str = "Debug"
    output_directory: Optional[str] = None
    version: Optional[str] = None
    release_notes: Optional[str] = None
    project: Optional[str] = None
    no_build: bool = True

    def to_args(self) -> List[str]:
        args = ['pack']
        if self.project:
            args.append(self.project)
        args += ['--configuration', self.configuration]
        if self.no_build:
            args.append('--no-build')
        if self.output_directory:
            args += ['--output', self.output_directory]
        if self.version:
            args.append(f'-p:PackageVersion={self.version}')
        if self.release_notes:
            args.append(f'-p:PackageReleaseNotes={self.release_notes}')
        return args


@dataclass
class DotNetNuGetPushSettings:
    """Options for `dotnet nuget push`."""
    target_path: str
    source: str
    api_key: str = field(default="", repr=False)

    def to_args(self, mask: bool = False) -> List[str]:
        args = ['nuget', 'push', self.target_path, '--source', self.source]
        if self.api_key:
            args += ['--api-key', MASK if mask else self.api_key]
        return args


class DotNetClient:
    """
    Abstraction over the dotnet CLI.

    Output of the tool streams straight to the console; only the exit
    code is inspected.

    Example:
        client = DotNetClient(cwd="/path/to/repo")
        client.restore()
        client.build(DotNetBuildSettings(configuration="Release"))
    """

    def __init__(self, executable: str = "dotnet", cwd: Union[str, Path, None] = None, timeout: Optional[int] = None):
        """
        Initialize DotNetClient.

        Args:
            executable: Path or name of the dotnet binary
            cwd: Working directory for every invocation
            timeout: Per-command timeout in seconds (None = no timeout)
        """
        self.executable = executable
        self.cwd = str(cwd) if cwd else None
        self.timeout = timeout

    def _run(self, args: List[str], display_args: Optional[List[str]] = None) -> None:
        cmd = [self.executable] + args
        shown = ' '.join([self.executable] + (display_args or args))
        logger.info(f"> {shown}")

        try:
            result = subprocess.run(cmd, cwd=self.cwd, timeout=self.timeout)
        except FileNotFoundError as e:
            raise ToolError(self.executable, 127, f"executable not found ({e})") from e
        except subprocess.TimeoutExpired as e:
            raise ToolError(self.executable, -1, f"timed out after {self.timeout}s: {shown}") from e

        if result.returncode != 0:
            raise ToolError(f"{self.executable} {args[0]}", result.returncode)

    def restore(self, settings: Optional[DotNetRestoreSettings] = None) -> None:
        """Run `dotnet restore`."""
        self._run((settings or DotNetRestoreSettings()).to_args())

    def build(self, settings: DotNetBuildSettings) -> None:
        """Run `dotnet build`."""
        self._run(settings.to_args())

    def pack(self, settings: DotNetPackSettings) -> None:
        """Run `dotnet pack`."""
        self._run(settings.to_args())

    def nuget_push(self, settings: DotNetNuGetPushSettings) -> None:
        """Run `dotnet nuget push`; the API key never reaches the log."""
        self._run(settings.to_args(), display_args=settings.to_args(mask=True))
