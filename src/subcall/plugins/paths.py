"""Locate the directory holding sibling command modules."""

from __future__ import annotations

import os
from pathlib import Path

from subcall.settings import SETTINGS, RuntimeSettings
from subcall.utils.fs import file_exists


class DiscoveryError(RuntimeError):
    """Raised when command discovery cannot complete."""


def resolve_command_dir(
    script_path: Path,
    *,
    cwd: Path | None = None,
    settings: RuntimeSettings = SETTINGS,
) -> Path:
    """Return the directory searched for command modules.

    Command modules sit next to the host script. A project-local install
    (``<cwd>/.venv/bin``) takes precedence when it holds the host launcher or
    its Windows ``.cmd`` wrapper, since such installs lay modules out there
    instead of next to a global script.
    """

    command_dir = Path(script_path).parent
    local_bin = Path(cwd or os.getcwd()) / settings.local_bin_dir
    launcher = local_bin / settings.tool_name
    launcher_cmd = local_bin / f"{settings.tool_name}{settings.wrapper_suffix}"
    if file_exists(launcher) or file_exists(launcher_cmd):
        command_dir = local_bin
    return command_dir


def iter_command_candidates(directory: Path, *, settings: RuntimeSettings = SETTINGS) -> list[Path]:
    """Return command module candidates in ``directory``, sorted by name."""

    try:
        names = os.listdir(directory)
    except OSError as exc:
        raise DiscoveryError(f"Failed to find sub-command files in {directory}: {exc}") from exc
    pattern = settings.command_pattern
    return [directory / name for name in sorted(names) if pattern.match(name)]
