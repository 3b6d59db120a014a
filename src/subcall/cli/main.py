"""Entry point for the subcall CLI."""

from __future__ import annotations

import argparse
import asyncio
import inspect
import shutil
import sys
import time
import traceback
from enum import Enum
from pathlib import Path
from textwrap import dedent
from typing import Any, Awaitable, Sequence

from subcall.cli.invocation import parse_invocation_pattern
from subcall.plugins.loader import DiscoveryError, Registry, UnknownCommandError, load_plugins
from subcall.settings import SETTINGS, RuntimeSettings
from subcall.utils.telemetry import record_structured_event


HELP_OVERVIEW = dedent(
    """
    Sub-commands are loaded at start-up from subcall_cmd*.py modules found next
    to the subcall launcher (or in ./.venv/bin for project-local installs).

    Built-in commands:
      - subcall build-dist   - assemble the distribution directory
      - subcall build-docs   - generate HTML/Markdown API documentation
    """
)


class HostState(Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    REGISTERED = "registered"
    DISPATCHING = "dispatching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def build_parser(registry: Registry) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=registry.settings.tool_name,
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    settings = registry.settings
    parser.add_argument("--version", action="version", version=f"{settings.tool_name} {settings.cli_version}")

    sub = parser.add_subparsers(dest="command", required=True, metavar="<command>")
    for name, entry in registry.items():
        invocation = parse_invocation_pattern(entry.pattern)
        if invocation.command != name:
            raise ValueError(f"Invocation pattern {entry.pattern!r} does not start with command name {name}")
        command_parser = sub.add_parser(name, help=entry.help, description=entry.help)
        invocation.apply(command_parser)
        entry.builder(command_parser)
    return parser


def requested_command(argv: Sequence[str]) -> str | None:
    """Return the first positional token, which names the command."""

    for token in argv:
        if not token.startswith("-"):
            return token
    return None


async def _await_result(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class CommandHost:
    """Discovers the sub-commands once, then dispatches exactly one of them."""

    def __init__(self, settings: RuntimeSettings = SETTINGS) -> None:
        self._settings = settings
        self._registry: Registry | None = None
        self.state = HostState.IDLE
        self.exit_code: int | None = None

    @property
    def registry(self) -> Registry:
        if self._registry is None:
            raise RuntimeError("Sub-commands have not been discovered")
        return self._registry

    def discover(self, script_path: Path, *, cwd: Path | None = None) -> Registry:
        if self.state is not HostState.IDLE:
            raise RuntimeError(f"Sub-command discovery cannot run in state {self.state.value}")
        self.state = HostState.DISCOVERING
        try:
            self._registry = load_plugins(script_path, cwd=cwd, settings=self._settings)
        except BaseException:
            self.state = HostState.FAILED
            raise
        self.state = HostState.REGISTERED
        return self._registry

    def dispatch(self, argv: Sequence[str]) -> int:
        if self.state is not HostState.REGISTERED:
            raise RuntimeError(f"Sub-commands cannot be dispatched in state {self.state.value}")
        registry = self.registry
        registry.freeze()
        self.state = HostState.DISPATCHING
        try:
            code = self._run(registry, list(argv))
        except BaseException:
            self.state = HostState.FAILED
            self.exit_code = 1
            raise
        self.state = HostState.SUCCEEDED
        self.exit_code = code
        return code

    def _run(self, registry: Registry, argv: list[str]) -> int:
        requested = requested_command(argv)
        if requested is not None:
            registry.get(requested)
        args = build_parser(registry).parse_args(argv)
        command = args.command
        del args.command
        runner = registry.runner(command)

        started = time.monotonic()
        result = runner(args)
        if inspect.isawaitable(result):
            result = asyncio.run(_await_result(result))
        if isinstance(result, bool) or not isinstance(result, int):
            raise TypeError(f"Sub-command {command} returned {type(result).__name__}, expected an int exit status")
        record_structured_event(
            self._settings,
            "dispatch.completed",
            payload={"command": command, "exit_code": result},
            status="ok" if result == 0 else "fail",
            component="dispatcher",
            duration_ms=(time.monotonic() - started) * 1000.0,
        )
        return result


def _host_script_path() -> Path:
    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else "subcall"
    candidate = Path(argv0)
    if not candidate.exists():
        located = shutil.which(argv0)
        if located:
            candidate = Path(located)
    return candidate.resolve()


def _record_failure(settings: RuntimeSettings, kind: str, message: str) -> None:
    record_structured_event(
        settings,
        "dispatch.failed",
        payload={"kind": kind, "message": message},
        level="error",
        status="fail",
        component="dispatcher",
    )


def main(
    argv: Sequence[str] | None = None,
    *,
    script_path: Path | None = None,
    cwd: Path | None = None,
) -> int:
    host = CommandHost(SETTINGS)
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        host.discover(script_path or _host_script_path(), cwd=cwd)
        return host.dispatch(args)
    except DiscoveryError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        _record_failure(SETTINGS, "discovery", str(exc))
        return 1
    except UnknownCommandError as exc:
        print(str(exc), file=sys.stderr)
        _record_failure(SETTINGS, "unknown-command", exc.name)
        return 1
    except SystemExit as exc:
        # argparse exits for --help, --version and usage errors
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1
    except Exception as exc:
        print("Caught unexpected exception", file=sys.stderr)
        traceback.print_exc()
        _record_failure(SETTINGS, "unexpected", repr(exc))
        return 1
