"""Subprocess execution service for acaupdater."""

import subprocess
from typing import List, Optional

from acaupdater.errors import UpdaterError


class CommandRunner:
    """Runs external commands to completion with consistent error handling."""

    def __init__(self, logger, default_timeout: Optional[float] = None, subprocess_module=subprocess):
        self.logger = logger
        self.default_timeout = default_timeout
        self.subprocess = subprocess_module

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        effective_timeout = timeout if timeout is not None else self.default_timeout

        # run() waits for exit and drains both pipes before returning
        try:
            result = self.subprocess.run(
                cmd,
                text=True,
                capture_output=True,
                timeout=effective_timeout,
            )
        except FileNotFoundError as exc:
            raise UpdaterError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise UpdaterError(f"Command timed out after {effective_timeout}s: {cmd_str}") from exc
        except OSError as exc:
            raise UpdaterError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip()
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if check:
            raise UpdaterError(message)

        self.logger.warning(message)
        return result
