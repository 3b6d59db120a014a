"""Sub-command contract for subcall command modules.

A command module is a file named ``subcall_cmd<anything>.py`` placed next to
the host entry point. It exposes its commands through a module attribute
named ``default`` holding one :class:`SubCommand` instance or a list of them::

    class Hello(SubCommand):
        def name(self) -> str:
            return "hello"

        def description(self) -> str:
            return "Say hello"

        def create(self):
            return lambda parser: parser

        def run(self, args) -> int:
            print("hello")
            return 0

    default = Hello()
"""

from __future__ import annotations

import argparse
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Union

OptionsBuilder = Callable[[argparse.ArgumentParser], argparse.ArgumentParser]

# A runner is passed the parsed arguments and produces the command exit code,
# either directly or through an awaitable.
SubCommandRunner = Callable[[argparse.Namespace], Union[int, Awaitable[int]]]


class SubCommand(ABC):
    """Abstract base class for CLI sub-commands."""

    @abstractmethod
    def name(self) -> str:
        """Return the unique name used to look the command up."""

    def command(self) -> str | None:
        """Return the invocation pattern, e.g. ``"serve <port> [host]"``.

        Only needed by commands with positional parameters. ``None`` means the
        command is invoked by its name alone.
        """

        return None

    @abstractmethod
    def description(self) -> str:
        """Return the one-line summary shown in help output."""

    @abstractmethod
    def create(self) -> OptionsBuilder:
        """Return a callback that declares the command options on a parser."""

    @abstractmethod
    def run(self, args: argparse.Namespace) -> int | Awaitable[int]:
        """Run the command and return its exit status."""


__all__ = ["OptionsBuilder", "SubCommand", "SubCommandRunner"]
