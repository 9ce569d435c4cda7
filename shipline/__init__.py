"""
shipline - Build, pack and release pipeline for a .NET library.

The pipeline is a small set of targets wired as a dependency chain:

    Clean -> Restore -> Compile -> Pack -> Push
                                      \\-> PublishGitHubRelease

Quick Start:
    shipline run                 # Compile (default target)
    shipline run Push            # ... through Pack, then push packages
    shipline plan PublishGitHubRelease

Programmatic use:
    from shipline import TargetRunner, create_targets

    runner = TargetRunner(create_targets())
    print(runner.plan(["Push"]))
"""

__version__ = "1.0.0"

from .domain import (
    Target,
    TargetResult,
    TargetStatus,
    RunSummary,
    Configuration,
    HostInfo,
    VersionInfo,
)
from .context import BuildContext
from .pipeline import create_targets, DEFAULT_TARGET
from .services import TargetRunner, Notifier, resolve_secrets
from .config import load_config

__all__ = [
    "__version__",
    "Target",
    "TargetResult",
    "TargetStatus",
    "RunSummary",
    "Configuration",
    "HostInfo",
    "VersionInfo",
    "BuildContext",
    "create_targets",
    "DEFAULT_TARGET",
    "TargetRunner",
    "Notifier",
    "resolve_secrets",
    "load_config",
]
