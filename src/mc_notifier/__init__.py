"""Discord notifications for Minecraft server logs."""

__version__ = "0.1.0"
