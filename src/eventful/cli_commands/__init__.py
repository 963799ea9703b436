"""CLI command modules for eventful."""

from .config import register_config_commands
from .events import register_event_commands

__all__ = [
    "register_config_commands",
    "register_event_commands",
]
