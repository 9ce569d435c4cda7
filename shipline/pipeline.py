"""
The release pipeline: target definitions for shipline.

    Clean -> Restore -> Compile -> Pack -> Push
                                      \\-> PublishGitHubRelease

Compile is the default target. Each action takes the BuildContext.
"""

import logging
import shutil
from typing import Callable, List

from .changelog import escape_for_msbuild, extract_latest_section_notes, get_complete_changelog
from .context import BuildContext
from .domain.build import Configuration
from .domain.target import Target
from .exit_codes import PreconditionError
from .infra.dotnet_client import (
    DotNetBuildSettings,
    DotNetNuGetPushSettings,
    DotNetPackSettings,
    DotNetRestoreSettings,
)
from .infra.github_client import GitHubReleaseSettings

logger = logging.getLogger(__name__)

DEFAULT_TARGET = "Compile"

CLEAN_PATTERNS = ("bin", "obj")


def clean(ctx: BuildContext) -> None:
    for root in ctx.clean_roots:
        if not root.is_dir():
            continue
        for pattern in CLEAN_PATTERNS:
            for directory in sorted(root.glob(f"**/{pattern}"), reverse=True):
                if directory.is_dir():
                    logger.debug(f"Deleting {directory}")
                    shutil.rmtree(directory)

    if ctx.output_dir.exists():
        shutil.rmtree(ctx.output_dir)
    ctx.output_dir.mkdir(parents=True)


def restore(ctx: BuildContext) -> None:
    ctx.dotnet.restore(DotNetRestoreSettings())


def compile_(ctx: BuildContext) -> None:
    ctx.dotnet.build(DotNetBuildSettings(
        configuration=str(ctx.configuration),
        no_restore=True,
        node_reuse=False,
        file_version=ctx.version.assembly_sem_file_ver,
        assembly_version=ctx.version.assembly_version,
        informational_version=ctx.version.informational_version,
    ))


def pack(ctx: BuildContext) -> None:
    release_notes = escape_for_msbuild(get_complete_changelog(ctx.changelog_file))
    ctx.dotnet.pack(DotNetPackSettings(
        configuration=str(ctx.configuration),
        no_build=True,
        output_directory=str(ctx.output_dir),
        version=ctx.version.nuget_version,
        release_notes=release_notes,
    ))


def push(ctx: BuildContext) -> None:
    """Push non-symbol packages to the feed, and to nuget.org from main."""
    packages = ctx.packages(include_symbols=False)
    if not packages:
        raise PreconditionError(f"No packages found in {ctx.output_dir}")

    for package in packages:
        ctx.dotnet.nuget_push(DotNetNuGetPushSettings(
            target_path=package,
            source=ctx.secret('feed_source'),
            api_key=ctx.secret('feed_access_token'),
        ))

        if ctx.is_main_branch:
            # Stable releases are published to NuGet
            ctx.dotnet.nuget_push(DotNetNuGetPushSettings(
                target_path=package,
                source=ctx.public_feed,
                api_key=ctx.secret('nuget_api_key'),
            ))

    ctx.notifier.send(
        "New Release",
        f"New release available for {ctx.product_name}: {ctx.version.nuget_version}",
        is_error=False,
    )


def build_release_notes(tag: str, entries: List[str]) -> str:
    return f"## {tag}\n" + "\n".join(entries)


def publish_github_release(ctx: BuildContext) -> None:
    tag = ctx.version.release_tag
    notes = build_release_notes(tag, extract_latest_section_notes(ctx.changelog_file))

    repository = ctx.git.github_repository(str(ctx.root), ctx.remote)
    if repository is None:
        raise PreconditionError(f"Remote '{ctx.remote}' is not a GitHub repository")

    packages = ctx.packages()
    if not packages:
        raise PreconditionError(f"No packages found in {ctx.output_dir}")

    ctx.github_client().publish_release(GitHubReleaseSettings(
        repository_owner=repository.owner,
        repository_name=repository.name,
        tag=tag,
        commit_sha=ctx.version.sha,
        release_notes=notes,
        artifact_paths=packages,
    ))


def _requires_secret(name: str):
    return (f"parameter '{name}'", lambda ctx: ctx.has_secret(name))


def create_targets() -> List[Target]:
    """All pipeline targets, in declaration order."""
    return [
        Target(
            name="Clean",
            action=clean,
            description="Delete bin/obj folders and recreate the output directory",
        ),
        Target(
            name="Restore",
            action=restore,
            depends_on=("Clean",),
            description="Restore NuGet dependencies",
        ),
        Target(
            name="Compile",
            action=compile_,
            depends_on=("Restore",),
            description="Build with version metadata from GitVersion",
        ),
        Target(
            name="Pack",
            action=pack,
            depends_on=("Compile",),
            description="Create NuGet packages with change-log release notes",
        ),
        Target(
            name="Push",
            action=push,
            depends_on=("Pack",),
            requires=(
                _requires_secret('feed_source'),
                _requires_secret('feed_access_token'),
                _requires_secret('nuget_api_key'),
                ("Configuration == Release", lambda ctx: ctx.configuration == Configuration.RELEASE),
            ),
            gate=lambda ctx: not ctx.host.is_pull_request,
            description="Push packages to the feed (and nuget.org from main)",
        ),
        Target(
            name="PublishGitHubRelease",
            action=publish_github_release,
            depends_on=("Pack",),
            requires=(_requires_secret('github_token'),),
            gate=lambda ctx: ctx.is_main_branch,
            description="Create a GitHub release with packages and notes (main only)",
        ),
    ]


def failure_notifier(ctx: BuildContext) -> Callable[[str], None]:
    """Build the runner's on_target_failed hook for this context."""
    def on_target_failed(target: str) -> None:
        if ctx.host.is_server_build:
            ctx.notifier.send(
                "Build Failed",
                f"Target {target} failed for {ctx.product_name}, Branch: {ctx.display_branch}",
                is_error=True,
            )
    return on_target_failed
