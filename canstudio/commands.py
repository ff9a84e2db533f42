"""A tree of interactive commands and the dispatch of typed lines to them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from canstudio.tokens import split_tokens, strip_comment

__all__ = ["CommandError", "Command", "dispatch"]


class CommandError(ValueError):
    """Raised when a line does not name a command or misuses its arguments."""


@dataclass
class Command:
    """A named command with optional handlers and sub-commands.

    ``action`` runs when the command is given without arguments and
    ``action_with_args`` when arguments follow it; either may be absent.
    """

    name: str = ""
    action: Callable[[], Any] | None = None
    action_with_args: Callable[[list[str]], Any] | None = None
    subcommands: list[Command] = field(default_factory=list)

    @property
    def runnable(self) -> bool:
        """Whether the command has any handler at all."""
        return self.action is not None or self.action_with_args is not None

    def add(self, command: Command) -> Command:
        """Append ``command`` as a sub-command and return ``self`` for chaining."""
        self.subcommands.append(command)
        return self

    def find(self, tokens: Iterable[str]) -> tuple[Command, list[str]]:
        """Follow ``tokens`` down the tree as far as they name sub-commands.

        Returns the deepest command reached and the tokens left over.
        """
        remaining = list(tokens)
        current = self
        while remaining:
            match = next(
                (sub for sub in current.subcommands if sub.name == remaining[0]),
                None,
            )
            if match is None:
                break
            current = match
            remaining.pop(0)
        return current, remaining

    def names(self) -> list[str]:
        """Return the full names of every leaf command below this one."""
        prefix = f"{self.name} " if self.name else ""
        found = [
            prefix + leaf for sub in self.subcommands for leaf in sub.names()
        ]
        return found or [self.name]


def dispatch(root: Command, line: str) -> Any:
    """Run the command that ``line`` names under ``root``.

    Anything from the first ``#`` is ignored, and an empty line or comment
    does nothing and returns ``None``. Otherwise the handler's result is
    returned. ``CommandError`` is raised when no command matches or the
    command cannot be used with or without the arguments given.
    """
    text = strip_comment(line)
    if not text:
        return None

    command, arguments = root.find(split_tokens(text))
    if not command.runnable:
        raise CommandError("this command does not exist")

    if arguments and command.action_with_args is not None:
        return command.action_with_args(arguments)
    if not arguments and command.action is not None:
        return command.action()
    if arguments:
        raise CommandError("this command does not need arguments")
    raise CommandError("this command needs arguments")