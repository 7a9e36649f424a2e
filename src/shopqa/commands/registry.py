"""Registry for named, reusable test commands.

A CommandRegistry is built once per suite (see create_default_registry)
and handed to every Session. Commands are plain functions taking the
session as their first argument and keep no state between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from shopqa.errors import UnknownCommandError

if TYPE_CHECKING:
    from shopqa.session import Session

logger = logging.getLogger(__name__)

CommandCallable = Callable[..., Any]


@dataclass(frozen=True)
class Command:
    name: str
    func: CommandCallable
    category: str = "general"
    description: str = ""


class CommandRegistry:
    """Name-keyed table of commands."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def register(
        self,
        name: str,
        func: CommandCallable,
        category: str = "general",
        description: str | None = None,
    ) -> Command:
        if name in self._commands:
            raise ValueError(f"Command '{name}' is already registered")
        doc = (func.__doc__ or "").strip().splitlines()
        command = Command(
            name=name,
            func=func,
            category=category,
            description=description if description is not None else (doc[0] if doc else ""),
        )
        self._commands[name] = command
        return command

    def command(
        self, name: str | None = None, category: str = "general"
    ) -> Callable[[CommandCallable], CommandCallable]:
        """Decorator form of register; defaults the name to the function name."""

        def decorator(func: CommandCallable) -> CommandCallable:
            self.register(name or func.__name__, func, category=category)
            return func

        return decorator

    def unregister(self, name: str) -> None:
        if name not in self._commands:
            raise UnknownCommandError(name)
        del self._commands[name]

    def get(self, name: str) -> Command:
        try:
            return self._commands[name]
        except KeyError:
            raise UnknownCommandError(
                name, suggestions=[f"Registered commands: {', '.join(self.names()) or 'none'}"]
            ) from None

    def has(self, name: str) -> bool:
        return name in self._commands

    def names(self, category: str | None = None) -> list[str]:
        return sorted(
            name for name, cmd in self._commands.items() if category is None or cmd.category == category
        )

    def categories(self) -> list[str]:
        return sorted({cmd.category for cmd in self._commands.values()})

    def run(self, name: str, session: Session, /, *args: Any, **kwargs: Any) -> Any:
        command = self.get(name)
        logger.debug(f"Running command {name} args={args} kwargs={kwargs}")
        return command.func(session, *args, **kwargs)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

