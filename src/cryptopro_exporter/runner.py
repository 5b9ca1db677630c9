"""External command execution."""

import logging
import subprocess
from typing import Optional

from .errors import CommandError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs a CryptoPro tool and returns its captured standard output."""

    def __init__(self, timeout: Optional[float] = None):
        # None means the tool may run for as long as it likes
        self.timeout = timeout

    def __call__(self, path: str, *args: str) -> str:
        """
        Run ``path`` with ``args``.

        Args:
            path: Executable to run
            args: Command-line arguments

        Returns:
            Captured stdout decoded as UTF-8

        Raises:
            CommandError: If the process could not be spawned, timed out
                or exited with a non-zero status
        """
        command = [path, *args]
        logger.debug("Running %s", " ".join(command))

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise CommandError(
                f"{path} timed out after {self.timeout} seconds", command
            )
        except (OSError, ValueError) as e:
            # ValueError: path or arguments contain a NUL byte
            raise CommandError(f"failed to run {path}: {e}", command)

        if result.returncode != 0:
            raise CommandError(
                f"{path} exited with status {result.returncode}",
                command,
                returncode=result.returncode,
                stderr=result.stderr or result.stdout,
            )

        logger.debug("%s returned %d bytes", path, len(result.stdout))
        return result.stdout
