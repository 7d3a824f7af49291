"""Host command execution and service control."""
