"""Configuration loading for macfix."""

import os

from macfix.config.models import ConfigOverrides, FixesConfig
from macfix.core.logging import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "MACFIX_"


def load_config(
    overrides: ConfigOverrides | None = None,
    verbose: bool = False,
    trace: bool = False,
) -> FixesConfig:
    """Build the run configuration from defaults and overrides.

    Args:
        overrides: Overrides from CLI/env (optional)
        verbose: Whether debug logging is enabled
        trace: Whether command tracing is enabled

    Returns:
        Validated configuration
    """
    config = FixesConfig(verbose=verbose, trace=trace)

    if overrides:
        _apply_overrides(config, overrides)

    logger.debug(
        "Configuration loaded",
        purge_snapd=config.purge_snapd,
        edit_grub=config.edit_grub,
        grub_file=config.grub_file,
    )
    return config


def _apply_overrides(config: FixesConfig, overrides: ConfigOverrides) -> None:
    """Apply overrides to a config object in place."""
    if overrides.purge_snapd:
        config.purge_snapd = True
    if overrides.edit_grub:
        config.edit_grub = True
    if overrides.grub_file:
        config.grub_file = overrides.grub_file


def get_env_overrides() -> ConfigOverrides:
    """Get configuration overrides from environment variables.

    Variables are prefixed with ``MACFIX_`` (e.g. ``MACFIX_PURGE_SNAPD``).
    The boolean toggles also accept their unprefixed names, so
    ``PURGE_SNAPD=1 sudo -E macfix`` keeps working.

    Returns:
        ConfigOverrides populated from environment variables
    """

    def get_bool(key: str) -> bool:
        val = os.getenv(f"{ENV_PREFIX}{key.upper()}")
        if val is None:
            val = os.getenv(key.upper())
        return val is not None and val.strip().lower() in ("1", "true", "yes")

    def get_str(key: str) -> str:
        return os.getenv(f"{ENV_PREFIX}{key.upper()}", "")

    return ConfigOverrides(
        purge_snapd=get_bool("purge_snapd"),
        edit_grub=get_bool("edit_grub"),
        grub_file=get_str("grub_file"),
    )
