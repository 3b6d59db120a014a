"""Translate Windows launcher stubs into the module they execute.

Installers on Windows cannot symlink a script into the binaries directory, so
they drop a ``.cmd`` stub next to it instead. The stub body looks like::

    @"%~dp0\\..\\Lib\\site-packages\\subcall\\subcall_cmd_docs.py"   %*

where the part after ``..\\`` is relative to the environment directory.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from subcall.settings import SETTINGS, RuntimeSettings


def resolve_real_module_path(
    contents: str,
    *,
    cwd: Path | None = None,
    settings: RuntimeSettings = SETTINGS,
) -> Path | None:
    """Return the module referenced by a stub, or ``None`` if there is none."""

    reference = re.compile(r"\.\.\\(.*" + re.escape(settings.module_suffix) + ")")
    match = reference.search(contents)
    if match is None:
        return None
    segments = [segment for segment in match.group(1).split("\\") if segment]
    return Path(cwd or os.getcwd()) / settings.dependency_dir / Path(*segments)
