"""Host command runner implementation."""

import asyncio
import os
import shutil
from pathlib import Path

from macfix.core.logging import get_logger
from macfix.system.command import Command, CommandError

logger = get_logger(__name__)


def _get_shell_path() -> str:
    """Get path to the shell to use for command execution.

    Returns:
        Path to shell executable

    Raises:
        RuntimeError: If no shell can be found
    """
    shell = os.getenv("SHELL")
    if shell:
        return shell

    for candidate in ["bash", "/bin/bash", "sh", "/bin/sh"]:
        if Path(candidate).exists():
            return candidate
        path = shutil.which(candidate)
        if path:
            return path

    raise RuntimeError("Could not find path to a shell")


class System:
    """Worker that executes commands on the local machine.

    Commands run one at a time; each call waits for the child process to
    exit before returning.
    """

    def __init__(self, trace: bool = False) -> None:
        """Initialize the System.

        Args:
            trace: Echo every command and its output to stdout
        """
        self._trace = trace
        self._shell = _get_shell_path()

    def is_root(self) -> bool:
        return os.geteuid() == 0

    async def run(self, cmd: Command) -> bytes:
        """Execute a command and return its output.

        Args:
            cmd: Command to execute

        Returns:
            Combined stdout/stderr output as bytes

        Raises:
            CommandError: If the command fails
        """
        command_string = cmd.command_string

        logger.debug("Starting command", command=command_string)

        process = await asyncio.create_subprocess_shell(
            command_string,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            executable=self._shell,
        )
        stdout, _ = await process.communicate()
        output_str = stdout.decode("utf-8", errors="replace")

        if self._trace:
            self._print_trace(command_string, output_str)

        if process.returncode != 0:
            returncode = process.returncode if process.returncode is not None else 1
            raise CommandError(command_string, returncode, output_str)

        logger.debug("Finished command", command=command_string)

        return stdout

    async def remove_tree(self, path: Path) -> bool:
        """Recursively remove a file or directory.

        Args:
            path: Path to remove

        Returns:
            True if something was removed, False if the path did not exist

        Raises:
            OSError: If removal fails
        """
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.is_dir():
            shutil.rmtree(path)
        else:
            return False

        logger.debug("Removed path", path=str(path))
        return True

    def _print_trace(self, command: str, output: str) -> None:
        print(f"\n\033[1;32;4mCommand:\033[0m \033[1m{command}\033[0m")
        if output:
            print(f"\033[1;32mOutput:\033[0m\n{output}")
