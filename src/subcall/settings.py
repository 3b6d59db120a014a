"""Runtime settings for the subcall host."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from subcall import __version__


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    log_dir: Path
    cli_version: str = __version__
    tool_name: str = "subcall"
    module_prefix: str = "subcall_cmd"
    module_suffix: str = ".py"
    wrapper_suffix: str = ".cmd"
    local_bin_dir: Path = Path(".venv") / "bin"
    dependency_dir: Path = Path(".venv")

    @property
    def command_pattern(self) -> re.Pattern[str]:
        """Names of sibling command modules: fixed prefix, no dots, fixed suffix."""

        return re.compile(f"^{re.escape(self.module_prefix)}[^.]*{re.escape(self.module_suffix)}$")

    @property
    def telemetry_file(self) -> Path:
        return self.log_dir / "telemetry.jsonl"


def _default_home_dir() -> Path:
    override = os.environ.get("SUBCALL_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".subcall"


def load_settings() -> RuntimeSettings:
    base = _default_home_dir()
    return RuntimeSettings(
        home_dir=base,
        log_dir=base / "logs",
    )


SETTINGS = load_settings()
