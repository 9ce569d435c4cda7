"""
Domain layer for shipline.

Contains pure domain objects with no I/O or side effects:
- Target: A named unit of pipeline work with dependencies and a gate
- Configuration / HostInfo: Build mode and host detection
- VersionInfo: Semantic version and commit metadata for the run
"""

from .target import Target, TargetResult, TargetStatus, RunSummary
from .build import Configuration, HostInfo, detect_host
from .version import VersionInfo

__all__ = [
    'Target',
    'TargetResult',
    'TargetStatus',
    'RunSummary',
    'Configuration',
    'HostInfo',
    'detect_host',
    'VersionInfo',
]
