"""Child process helpers."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Mapping, Sequence


class CommandExecutionError(RuntimeError):
    """Raised when a child process cannot be started."""


def execute_command(
    cmd: str,
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    """Run ``cmd`` with inherited stdio and return its exit status."""

    try:
        result = subprocess.run([cmd, *args], cwd=cwd, env=env)
    except FileNotFoundError as exc:
        raise CommandExecutionError(f"Failed to start command: {cmd}") from exc
    return result.returncode


def execute_and_get_output(
    cmd: str,
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> list[str]:
    """Run ``cmd`` and return its standard output split into lines.

    Standard error is inherited. A non-zero exit status is an error.
    """

    try:
        result = subprocess.run([cmd, *args], cwd=cwd, env=env, stdout=subprocess.PIPE, text=True)
    except FileNotFoundError as exc:
        raise CommandExecutionError(f"Failed to start command: {cmd}") from exc
    if result.returncode != 0:
        raise CommandExecutionError(f"Command {cmd} exited with status {result.returncode}")
    return result.stdout.splitlines()
