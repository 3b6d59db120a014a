"""Invocation patterns: ``name <required> [optional] [rest..]``."""

from __future__ import annotations

import argparse
import re
from dataclasses import dataclass

_TOKEN = re.compile(r"^(?P<open>[<\[])(?P<name>[A-Za-z_][\w-]*)(?P<variadic>\.\.)?(?P<close>[>\]])$")


@dataclass(frozen=True)
class Positional:
    name: str
    nargs: str | None


@dataclass(frozen=True)
class InvocationPattern:
    command: str
    positionals: tuple[Positional, ...] = ()

    def apply(self, parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
        for positional in self.positionals:
            if positional.nargs is None:
                parser.add_argument(positional.name)
            else:
                parser.add_argument(positional.name, nargs=positional.nargs)
        return parser


def parse_invocation_pattern(pattern: str) -> InvocationPattern:
    """Split a pattern into the command token and its positional parameters.

    ``<x>`` is required, ``[x]`` optional, and a trailing ``..`` makes either
    variadic (``<x..>`` one or more, ``[x..]`` zero or more).
    """

    tokens = pattern.split()
    if not tokens:
        raise ValueError("Invocation pattern is empty")
    command, *rest = tokens
    positionals: list[Positional] = []
    for token in rest:
        match = _TOKEN.match(token)
        if match is None or {match["open"], match["close"]} not in ({"<", ">"}, {"[", "]"}):
            raise ValueError(f"Invalid positional {token!r} in invocation pattern {pattern!r}")
        required = match["open"] == "<"
        if match["variadic"]:
            nargs: str | None = "+" if required else "*"
        else:
            nargs = None if required else "?"
        positionals.append(Positional(name=match["name"], nargs=nargs))
    return InvocationPattern(command=command, positionals=tuple(positionals))
