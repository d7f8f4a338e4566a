"""OS command execution for the power, lock and do-not-disturb actions.

The executor exposes one coroutine per primitive (``shutdown``, ``reboot``,
``lock``, ``hibernate``, ``set_do_not_disturb``, ``abort_shutdown``) on top
of ``run``. Platform subclasses only supply the command strings; see
platform_win.py and platform_unix.py.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """An OS command could not be completed."""

    def __init__(self, command: str, message: str):
        super().__init__(message)
        self.command = command


class CommandTimeoutError(CommandError):
    """The command did not finish within its timeout and was killed."""

    def __init__(self, command: str, timeout: float):
        super().__init__(command, f"Command timed out after {timeout:g}s: {command}")
        self.timeout = timeout


class CommandFailedError(CommandError):
    """The command exited with a non-zero status."""

    def __init__(self, command: str, exit_code: int, stderr: str = ""):
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(command, f"Command exited with {exit_code}{detail}")
        self.exit_code = exit_code
        self.stderr = stderr


class UnsupportedCommandError(CommandError):
    """The current platform has no command for this primitive."""

    def __init__(self, primitive: str, platform_name: str):
        super().__init__("", f"{primitive} is not supported on {platform_name}")
        self.primitive = primitive


class CommandExecutor:
    """Runs shell commands asynchronously with a timeout.

    Subclasses set the ``*_command`` attributes for their platform. A primitive
    whose command is None raises UnsupportedCommandError.
    """

    platform_name = "generic"

    shutdown_command: Optional[str] = None
    reboot_command: Optional[str] = None
    lock_command: Optional[str] = None
    hibernate_command: Optional[str] = None

    def __init__(self, timeout: float = 5.0, abort_timeout: float = 2.0):
        self.timeout = timeout
        self.abort_timeout = abort_timeout

    async def run(self, command: str, timeout: Optional[float] = None) -> int:
        """Run ``command`` through the shell and return its exit code.

        Raises CommandTimeoutError when the timeout elapses (the process is
        killed) and CommandError when the process cannot be started.
        """
        exit_code, _ = await self._spawn(command, timeout)
        return exit_code

    async def _spawn(self, command: str, timeout: Optional[float]) -> Tuple[int, str]:
        limit = self.timeout if timeout is None else timeout
        logger.debug(f"Running command: {command}")
        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CommandError(command, f"Could not start command: {e}") from e

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=limit)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise CommandTimeoutError(command, limit)

        return process.returncode, (stderr or b"").decode(errors="replace")

    async def run_checked(self, command: str, timeout: Optional[float] = None) -> None:
        """Run ``command`` and raise CommandFailedError on a non-zero exit."""
        exit_code, stderr = await self._spawn(command, timeout)
        if exit_code != 0:
            raise CommandFailedError(command, exit_code, stderr)

    async def _run_primitive(self, primitive: str, command: Optional[str]) -> None:
        if not command:
            raise UnsupportedCommandError(primitive, self.platform_name)
        logger.info(f"Executing {primitive}: {command}")
        await self.run_checked(command)

    async def shutdown(self) -> None:
        await self._run_primitive("shutdown", self.shutdown_command)

    async def reboot(self) -> None:
        await self._run_primitive("reboot", self.reboot_command)

    async def lock(self) -> None:
        await self._run_primitive("lock", self.lock_command)

    async def hibernate(self) -> None:
        await self._run_primitive("hibernate", self.hibernate_command)

    async def set_do_not_disturb(self, enabled: bool) -> None:
        """Toggle notification suppression.

        Platforms without a preference to flip only log the request.
        """
        logger.info(
            f"Do-not-disturb {'enabled' if enabled else 'disabled'} "
            f"(no system preference on {self.platform_name})"
        )

    async def abort_shutdown(self) -> bool:
        """Abort an OS-level scheduled shutdown.

        Returns True when one was pending and got aborted, False otherwise
        (including platforms that cannot query it).
        """
        return False

    @property
    def supports_shutdown_query(self) -> bool:
        return False


class DryRunExecutor(CommandExecutor):
    """Records and logs commands instead of running them."""

    def __init__(self, delegate: CommandExecutor):
        super().__init__(timeout=delegate.timeout, abort_timeout=delegate.abort_timeout)
        self.platform_name = delegate.platform_name
        self.shutdown_command = delegate.shutdown_command
        self.reboot_command = delegate.reboot_command
        self.lock_command = delegate.lock_command
        self.hibernate_command = delegate.hibernate_command
        self.commands: List[str] = []

    async def _spawn(self, command: str, timeout: Optional[float]) -> Tuple[int, str]:
        logger.warning(f"[dry-run] Would run: {command}")
        self.commands.append(command)
        return 0, ""
