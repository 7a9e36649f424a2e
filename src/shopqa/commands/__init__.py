"""Named, reusable test commands grouped by category."""

from shopqa.commands.api import register_api_commands
from shopqa.commands.cart import register_cart_commands
from shopqa.commands.navigation import SECTIONS, register_navigation_commands, resolve_section
from shopqa.commands.registry import Command, CommandRegistry


def create_default_registry() -> CommandRegistry:
    """Registry holding the navigation, cart and API commands."""
    registry = CommandRegistry()
    register_navigation_commands(registry)
    register_cart_commands(registry)
    register_api_commands(registry)
    return registry


__all__ = [
    "SECTIONS",
    "Command",
    "CommandRegistry",
    "create_default_registry",
    "register_api_commands",
    "register_cart_commands",
    "register_navigation_commands",
    "resolve_section",
]
