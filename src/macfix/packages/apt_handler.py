"""Apt package handler for purging packages."""

from macfix.core.logging import get_logger
from macfix.system.command import Command, CommandError
from macfix.system.worker import Worker

logger = get_logger(__name__)


class AptHandler:
    """Handler for removing Debian packages via apt-get.

    The package index is refreshed once, before the first purge issued
    through this handler.
    """

    def __init__(self, system: Worker) -> None:
        """Initialize the AptHandler.

        Args:
            system: System worker for executing commands
        """
        self.system = system
        self._cache_updated = False

    async def purge(self, package: str) -> None:
        """Purge a single package together with its configuration files.

        Args:
            package: Package name to purge

        Raises:
            CommandError: If apt-get purge fails
        """
        await self._update_apt_cache()

        cmd = Command(executable="apt-get", args=["purge", "-y", package])
        await self.system.run(cmd)

        logger.info("Purged apt package", package=package)

    async def autoremove(self) -> None:
        """Remove dependencies that are no longer needed.

        Raises:
            CommandError: If apt-get autoremove fails
        """
        cmd = Command(executable="apt-get", args=["autoremove", "-y"])
        await self.system.run(cmd)

        logger.info("Removed unused apt dependencies")

    async def _update_apt_cache(self) -> None:
        """Refresh the package index once; a failure is only logged."""
        if self._cache_updated:
            return
        self._cache_updated = True

        cmd = Command(executable="apt-get", args=["update", "-y"])
        try:
            await self.system.run(cmd)
        except CommandError as e:
            logger.warning("Could not refresh apt package index", error=e.reason)
