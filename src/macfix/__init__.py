"""Boot-stability and boot-time fixes for Ubuntu on Intel Macs."""

__version__ = "0.1.0"
