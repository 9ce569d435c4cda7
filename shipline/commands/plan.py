"""
Handles the 'plan' and 'targets' commands: inspect the pipeline
without running anything.
"""

import click

from ..cli_utils import standard_command, add_common_options
from ..pipeline import DEFAULT_TARGET, create_targets
from ..render import render_plan, render_targets
from ..services.runner import TargetRunner


@click.command(name='plan')
@click.argument('targets', nargs=-1)
@add_common_options('skip')
@standard_command
def plan_handler(targets, skip):
    """Show the order in which TARGETS (default: Compile) would run."""
    runner = TargetRunner(create_targets())
    order = runner.plan(list(targets) or [DEFAULT_TARGET])
    runner.plan(skip)
    render_plan(order, skip)


@click.command(name='targets')
@standard_command
def targets_handler():
    """List all targets and their dependencies."""
    render_targets(create_targets(), DEFAULT_TARGET)
