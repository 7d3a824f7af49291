"""Command models for host execution."""

import shlex
from dataclasses import dataclass, field
from shutil import which


@dataclass
class Command:
    """A command to be executed on the host.

    Attributes:
        executable: The program to run, resolved against PATH when possible
        args: Arguments to pass to the executable
    """

    executable: str
    args: list[str] = field(default_factory=list)

    @property
    def full_command(self) -> list[str]:
        """Build the argument vector with the executable resolved.

        Returns:
            List of command components
        """
        executable_path = which(self.executable) or self.executable
        return [executable_path, *self.args]

    @property
    def command_string(self) -> str:
        """Build the command as a properly escaped shell string.

        Returns:
            Shell-escaped command string
        """
        return shlex.join(self.full_command)


class CommandError(Exception):
    """Raised when a command exits non-zero.

    Attributes:
        command: The command that failed
        returncode: Exit code from the command
        output: Combined stdout/stderr output
    """

    def __init__(self, command: str, returncode: int, output: str) -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(f"Command failed with exit code {returncode}: {command}")

    @property
    def reason(self) -> str:
        """Last non-empty line of output, or the exit code when there is none."""
        lines = [line.strip() for line in self.output.splitlines() if line.strip()]
        if lines:
            return lines[-1]
        return f"exit code {self.returncode}"
