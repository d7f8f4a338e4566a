"""Windows commands for the OS executor."""

import logging

from clocked.system.executor import CommandError, CommandExecutor

logger = logging.getLogger(__name__)

# "Unable to abort the system shutdown because no shutdown was in progress."
ERROR_NO_SHUTDOWN_IN_PROGRESS = 1116


class WindowsExecutor(CommandExecutor):
    platform_name = "Windows"

    shutdown_command = "shutdown /s /t 0"
    reboot_command = "shutdown /r /t 0"
    lock_command = "rundll32.exe user32.dll,LockWorkStation"
    hibernate_command = "shutdown /h"
    abort_command = "shutdown /a"

    async def abort_shutdown(self) -> bool:
        try:
            exit_code = await self.run(self.abort_command, timeout=self.abort_timeout)
        except CommandError as e:
            logger.warning(f"Could not abort Windows shutdown: {e}")
            return False

        if exit_code == 0:
            logger.info("Aborted a pending Windows shutdown")
            return True
        if exit_code == ERROR_NO_SHUTDOWN_IN_PROGRESS:
            logger.debug("No Windows shutdown was pending")
        else:
            logger.warning(f"Could not abort Windows shutdown (exit code {exit_code})")
        return False

    @property
    def supports_shutdown_query(self) -> bool:
        return True
