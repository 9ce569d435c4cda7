#!/usr/bin/env python3

import click

from shipline.commands.run import run_handler
from shipline.commands.plan import plan_handler, targets_handler
from shipline.commands.config import config_cmd


@click.group()
@click.version_option(package_name='shipline')
def cli():
    """shipline - Build, pack and release pipeline for a .NET library.

    Runs the Clean, Restore, Compile, Pack, Push and PublishGitHubRelease
    targets in dependency order, with Teams notifications on failure and
    on new releases.
    """
    pass


cli.add_command(run_handler, name='run')
cli.add_command(plan_handler, name='plan')
cli.add_command(targets_handler, name='targets')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
