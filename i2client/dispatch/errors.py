"""
Dispatch-specific exceptions.

This module defines the exception hierarchy for command dispatch errors.
All exceptions inherit from DispatchError for easy catching.
"""


class DispatchError(Exception):
    """
    Base exception for dispatch errors.

    All dispatch-related exceptions inherit from this class, so callers
    can treat a missing executable and a rejected command the same way.
    """

    def __init__(self, message: str, command: str = None):
        super().__init__(message)
        self.command = command


class ExecutableNotFoundError(DispatchError):
    """
    Device executable could not be started.

    Raised when the configured exec path does not exist or the shell
    cannot launch it.
    """
    pass


class CommandFailedError(DispatchError):
    """
    Executable exited with a non-zero status.

    Attributes:
        returncode: Process exit status
    """

    def __init__(self, message: str, command: str = None, returncode: int = None):
        super().__init__(message, command)
        self.returncode = returncode


class CommandRejectedError(DispatchError):
    """
    Executable wrote to stderr.

    The device executable reports rejected commands on stderr even when
    it exits cleanly.

    Attributes:
        stderr: Decoded error output
    """

    def __init__(self, message: str, command: str = None, stderr: str = ''):
        super().__init__(message, command)
        self.stderr = stderr


class CommandTimeoutError(DispatchError):
    """Executable did not finish within the configured timeout."""
    pass
