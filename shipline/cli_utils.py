"""
Common CLI utilities and decorators for consistent command behavior.
"""

import logging
import sys
import click
from functools import wraps

from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)

logger = logging.getLogger("shipline")


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Consistent error handling with exit codes from exit_codes
    - Errors reported through logging on stderr
    - Exit code 0 when the command returns normally
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            func(*args, **kwargs)
            sys.exit(SUCCESS)
        except KeyboardInterrupt:
            logger.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            logger.error(str(e))
            sys.exit(e.exit_code)
        except Exception as e:
            logger.error(f"Command failed: {e}")
            logger.debug("Traceback:", exc_info=True)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Enable debug logging'),
    'root': click.option('--root', type=click.Path(file_okay=False, exists=True),
                         default=None, help='Repository root (default: current directory)'),
    'skip': click.option('--skip', 'skip', multiple=True, metavar='TARGET',
                         help='Skip a target (repeatable)'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'root')
        def my_command(verbose, root):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
