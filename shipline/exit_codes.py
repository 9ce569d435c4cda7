"""
Standard exit codes for shipline runs.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, unknown target)

# Application-specific exit codes (64-113 are typically available)
API_ERROR = 65           # External API call failed (GitHub, Teams, Key Vault)
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
NETWORK_ERROR = 68       # Network connection failed
PRECONDITION_ERROR = 72  # Required parameter missing or assertion failed
TOOL_ERROR = 73          # External tool returned non-zero
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': GENERAL_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that targets and commands raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class APIError(CommandError):
    """Raised when an external API call fails."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, API_ERROR)
        self.status_code = status_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class PreconditionError(CommandError):
    """Raised when a pipeline assertion fails (e.g. no packages produced)."""
    def __init__(self, message: str):
        super().__init__(message, PRECONDITION_ERROR)


class ParameterMissingError(PreconditionError):
    """Raised when a target's required parameter is absent or its requirement is false."""
    def __init__(self, target: str, requirement: str):
        super().__init__(f"Target '{target}' requires {requirement}")
        self.target = target
        self.requirement = requirement


class ToolError(CommandError):
    """Raised when an external tool exits non-zero or cannot be started."""
    def __init__(self, tool: str, returncode: int, stderr: str = ""):
        message = f"{tool} exited with code {returncode}"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(message, TOOL_ERROR)
        self.tool = tool
        self.returncode = returncode
        self.stderr = stderr


class UnknownTargetError(CommandError):
    """Raised when a requested target is not defined."""
    def __init__(self, name: str, known: list):
        super().__init__(
            f"Unknown target '{name}'. Available targets: {', '.join(known)}",
            USAGE_ERROR,
        )
        self.name = name


class CyclicDependencyError(CommandError):
    """Raised when target dependencies form a cycle."""
    def __init__(self, chain: list):
        super().__init__(f"Cyclic target dependency: {' -> '.join(chain)}", USAGE_ERROR)
        self.chain = chain


class TargetFailedError(CommandError):
    """Raised by the runner when a target fails; carries the cause's exit code."""
    def __init__(self, target: str, cause: Exception):
        super().__init__(
            f"Target '{target}' failed: {cause}",
            get_exit_code_for_exception(cause),
        )
        self.target = target
        self.cause = cause
