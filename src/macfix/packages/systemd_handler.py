"""Systemd unit handler for masking, disabling and enabling units."""

from macfix.core.logging import get_logger
from macfix.system.command import Command, CommandError
from macfix.system.worker import Worker

logger = get_logger(__name__)

UNKNOWN_STATE = "unknown"


class SystemdHandler:
    """Handler for managing systemd units via systemctl."""

    def __init__(self, system: Worker) -> None:
        """Initialize the SystemdHandler.

        Args:
            system: System worker for executing commands
        """
        self.system = system

    async def mask(self, unit: str) -> None:
        """Mask and stop a unit so it cannot be started until unmasked.

        Raises:
            CommandError: If systemctl fails
        """
        await self._systemctl("mask", "--now", unit)
        logger.info("Masked unit", unit=unit)

    async def unmask(self, unit: str) -> None:
        """Remove a mask from a unit.

        Raises:
            CommandError: If systemctl fails
        """
        await self._systemctl("unmask", unit)
        logger.info("Unmasked unit", unit=unit)

    async def disable(self, unit: str) -> None:
        """Disable and stop a unit.

        Raises:
            CommandError: If systemctl fails
        """
        await self._systemctl("disable", "--now", unit)
        logger.info("Disabled unit", unit=unit)

    async def enable(self, unit: str) -> None:
        """Enable and start a unit.

        Raises:
            CommandError: If systemctl fails
        """
        await self._systemctl("enable", "--now", unit)
        logger.info("Enabled unit", unit=unit)

    async def stop(self, unit: str) -> None:
        """Stop a running unit without changing its enablement.

        Raises:
            CommandError: If systemctl fails
        """
        await self._systemctl("stop", unit)
        logger.info("Stopped unit", unit=unit)

    async def is_enabled(self, unit: str) -> str:
        """Get the enablement state of a unit (``enabled``, ``masked``, ...).

        ``systemctl is-enabled`` exits non-zero for disabled and masked units,
        so the state is taken from the output in either case.

        Args:
            unit: Unit to query

        Returns:
            State reported by systemctl, or ``unknown`` if there was none
        """
        try:
            output = (await self._systemctl("is-enabled", unit)).decode(
                "utf-8", errors="replace"
            )
        except CommandError as e:
            output = e.output
        lines = [line.strip() for line in output.splitlines() if line.strip()]
        if not lines or " " in lines[0]:
            return UNKNOWN_STATE
        return lines[0]

    async def failed_units(self) -> str:
        """Get the ``systemctl --failed`` listing.

        Raises:
            CommandError: If systemctl fails
        """
        output = await self._systemctl("--failed", "--no-pager")
        return output.decode("utf-8", errors="replace").rstrip()

    async def _systemctl(self, *args: str) -> bytes:
        cmd = Command(executable="systemctl", args=list(args))
        return await self.system.run(cmd)
