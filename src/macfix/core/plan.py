"""The fixed set of changes macfix applies."""

from pathlib import Path

from macfix.config.models import FixesConfig
from macfix.core.kernel_args import kernel_args_transform
from macfix.core.models import Action, ConfigLine, DesiredStateEntry

RFKILL_REASON = "prevents 'Load/Save RF Kill Switch Status' boot failures"
PLYMOUTH_MASK_REASON = "prevents VT stealing and blinking boot logs"
PLYMOUTH_PURGE_REASON = "removes the splash and early-boot VT weirdness"
WAIT_ONLINE_REASON = "removes unnecessary boot blocking"
UDEV_SETTLE_REASON = "avoids blocking boot while waiting for udev to settle"
SNAPD_REASON = "prevents early snap namespace and mount churn"
SNAPD_PURGE_REASON = "purge requested"
FSTRIM_REASON = "keeps SSD performance up over time"

PLYMOUTH_UNITS = [
    "plymouth-start.service",
    "plymouth-quit.service",
    "plymouth-quit-wait.service",
]
PLYMOUTH_PACKAGES = ["plymouth", "plymouth-theme-ubuntu-text", "plymouth-theme-spinner"]
SNAPD_PATHS = ["/snap", "/var/snap", "/var/lib/snapd"]

WATCHED_UNITS = [
    "NetworkManager-wait-online.service",
    "snapd.socket",
    "fstrim.timer",
    "systemd-rfkill.service",
]


def _entries(names: list[str], action: Action, reason: str) -> list[DesiredStateEntry]:
    return [DesiredStateEntry(name=name, action=action, reason=reason) for name in names]


class Plan:
    """Ordered entries and config edits for one run.

    The list is static; ``FixesConfig`` only switches the optional snapd
    purge and GRUB edit on or off.
    """

    def __init__(self, config: FixesConfig) -> None:
        """Initialize the Plan.

        Args:
            config: Run configuration
        """
        self.config = config
        self.entries: list[DesiredStateEntry] = []
        self.config_edits: list[tuple[Path, ConfigLine]] = []
        self.watched_units = list(WATCHED_UNITS)

        self.entries += _entries(
            ["systemd-rfkill.service", "systemd-rfkill.socket"], Action.MASK, RFKILL_REASON
        )
        self.entries += _entries(PLYMOUTH_UNITS, Action.MASK, PLYMOUTH_MASK_REASON)
        self.entries += _entries(PLYMOUTH_PACKAGES, Action.PURGE, PLYMOUTH_PURGE_REASON)
        self.entries += _entries(
            ["NetworkManager-wait-online.service"], Action.DISABLE, WAIT_ONLINE_REASON
        )
        self.entries += _entries(["systemd-udev-settle.service"], Action.MASK, UDEV_SETTLE_REASON)
        self.entries += _entries(["snapd.socket"], Action.DISABLE, SNAPD_REASON)
        self.entries += _entries(["snapd.service"], Action.STOP, SNAPD_REASON)

        if config.purge_snapd:
            self.entries += _entries(["snapd"], Action.PURGE, SNAPD_PURGE_REASON)
            self.entries += _entries(SNAPD_PATHS, Action.REMOVE, SNAPD_PURGE_REASON)

        self.entries += _entries(["fstrim.timer"], Action.ENABLE, FSTRIM_REASON)

        if config.edit_grub:
            transform = kernel_args_transform(
                strip=config.strip_kernel_args, append=config.append_kernel_args
            )
            self.config_edits.append(
                (Path(config.grub_file), ConfigLine(key=config.grub_key, transform=transform))
            )
