"""Worker protocol for host operations."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from macfix.system.command import Command


@runtime_checkable
class Worker(Protocol):
    """Protocol for something that can run commands and touch the filesystem.

    The real implementation is ``macfix.system.runner.System``; tests swap in
    mocks.
    """

    async def run(self, cmd: Command) -> bytes:
        """Execute a command and return its output.

        Args:
            cmd: Command to execute

        Returns:
            Combined stdout/stderr output as bytes

        Raises:
            CommandError: If the command fails
        """
        ...

    def is_root(self) -> bool:
        """Report whether the process has root privileges."""
        ...

    async def remove_tree(self, path: Path) -> bool:
        """Recursively remove a file or directory.

        Args:
            path: Absolute path to remove

        Returns:
            True if something was removed, False if the path did not exist

        Raises:
            OSError: If removal fails
        """
        ...
