"""Configuration models for macfix using Pydantic."""

from pydantic import BaseModel, Field


class ConfigOverrides(BaseModel):
    """CLI flag and environment variable overrides for configuration."""

    purge_snapd: bool = False
    edit_grub: bool = False
    grub_file: str = ""


class FixesConfig(BaseModel):
    """Settings for a single macfix run."""

    purge_snapd: bool = False
    edit_grub: bool = False
    grub_file: str = "/etc/default/grub"
    grub_key: str = "GRUB_CMDLINE_LINUX_DEFAULT"
    strip_kernel_args: list[str] = Field(default_factory=lambda: ["quiet", "splash"])
    append_kernel_args: list[str] = Field(default_factory=lambda: ["usbcore.autosuspend=-1"])

    # Runtime fields
    verbose: bool = False
    trace: bool = False
