"""HostControl implementation backed by systemctl, apt-get and the filesystem."""

from pathlib import Path

from macfix.core.logging import get_logger
from macfix.core.models import Action
from macfix.packages.apt_handler import AptHandler
from macfix.packages.systemd_handler import SystemdHandler
from macfix.system.command import Command
from macfix.system.worker import Worker

logger = get_logger(__name__)


class SystemHost:
    """Applies actions to the local machine through a ``Worker``."""

    def __init__(self, system: Worker) -> None:
        """Initialize the SystemHost.

        Args:
            system: System worker for executing commands
        """
        self.system = system
        self.systemd = SystemdHandler(system)
        self.apt = AptHandler(system)

    async def apply(self, action: Action, target: str) -> bool:
        """Apply ``action`` to ``target``.

        Args:
            action: Action to apply
            target: Unit name, package name or path

        Returns:
            False if nothing needed doing (a path already absent, or
            Action.NONE), True otherwise

        Raises:
            CommandError: If the underlying command fails
            OSError: If removing a path fails
            ValueError: If the action is unknown
        """
        if action is Action.MASK:
            await self.systemd.mask(target)
        elif action is Action.UNMASK:
            await self.systemd.unmask(target)
        elif action is Action.DISABLE:
            await self.systemd.disable(target)
        elif action is Action.ENABLE:
            await self.systemd.enable(target)
        elif action is Action.STOP:
            await self.systemd.stop(target)
        elif action is Action.PURGE:
            await self.apt.purge(target)
        elif action is Action.REMOVE:
            return await self._remove_path(Path(target))
        elif action is Action.NONE:
            return False
        else:
            raise ValueError(f"Unknown action: {action}")
        return True

    async def autoremove(self) -> None:
        await self.apt.autoremove()

    async def regenerate_bootloader(self) -> None:
        """Run update-grub so edits to the GRUB defaults take effect.

        Raises:
            CommandError: If update-grub fails
        """
        await self.system.run(Command(executable="update-grub"))
        logger.info("Regenerated GRUB configuration")

    async def _remove_path(self, path: Path) -> bool:
        if await self.system.remove_tree(path):
            logger.info("Removed path", path=str(path))
            return True
        logger.debug("Path already absent", path=str(path))
        return False
