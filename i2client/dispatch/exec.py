"""
Dispatcher backed by the device's bundled exec executable.

Each command runs as its own shell invocation:

    "C:/Program Files (x86)/TWC/i2/exec.exe" -async loadPres("Flavor=...")

The command text is appended to the shell line untouched so the quoting
the device expects survives.
"""

import asyncio
import logging
from typing import Optional

from .adapter import CommandDispatcher
from .errors import (
    CommandFailedError,
    CommandRejectedError,
    CommandTimeoutError,
    ExecutableNotFoundError,
)

# Exit codes shells use for "command not found" (POSIX sh, Windows cmd.exe)
NOT_FOUND_EXIT_CODES = (127, 9009)


class ExecDispatcher(CommandDispatcher):
    """
    Run device commands through the exec executable.

    Args:
        config: DeviceConfig providing exec_path, async_mode and
                command_timeout
        logger: Optional logger instance
    """

    def __init__(self, config, logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self.config = config

    def build_command_line(self, command: str) -> str:
        """Return the full shell line for a device command."""
        flag = ' -async' if self.config.async_mode else ''
        return f'"{self.config.exec_path}"{flag} {command}'

    @staticmethod
    async def _terminate(proc) -> None:
        """Kill the exec process and reap it."""
        try:
            proc.kill()
        except ProcessLookupError:
            # Already exited between communicate() and kill()
            pass
        await proc.wait()

    async def dispatch(self, command: str) -> str:
        full_command = self.build_command_line(command)
        self.logger.debug(f"Dispatching: {full_command}")

        try:
            proc = await asyncio.create_subprocess_shell(
                full_command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExecutableNotFoundError(
                f"Could not start {self.config.exec_path}: {e}", command
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.config.command_timeout
            )
        except asyncio.TimeoutError:
            await self._terminate(proc)
            raise CommandTimeoutError(
                f"Command timed out after {self.config.command_timeout}s", command
            )
        except asyncio.CancelledError:
            # Caller is gone (client shutdown, Ctrl-C); don't leave exec running
            self.logger.debug(f"Dispatch cancelled, killing: {full_command}")
            await self._terminate(proc)
            raise

        out = stdout.decode('utf-8', errors='replace') if stdout else ''
        err = stderr.decode('utf-8', errors='replace') if stderr else ''

        if proc.returncode in NOT_FOUND_EXIT_CODES:
            raise ExecutableNotFoundError(
                f"Executable not found: {self.config.exec_path}", command
            )
        if proc.returncode != 0:
            raise CommandFailedError(
                f"Command exited with status {proc.returncode}: {err.strip()}",
                command,
                returncode=proc.returncode,
            )
        if err:
            raise CommandRejectedError(
                f"Device reported an error: {err.strip()}", command, stderr=err
            )

        return out
