"""Assemble a publishable distribution directory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from subcall.settings import SETTINGS, RuntimeSettings
from subcall.utils.fs import copy_path, dir_exists, file_exists, filter_file, path_exists
from subcall.utils.telemetry import record_event

ALWAYS_COPY: tuple[str, ...] = ("README.md", "CHANGELOG.md", "LICENSE", "yarn.lock")
PACKAGE_MANIFEST = "package.json"
DIST_PREFIX = "dist/"


class DistBuildError(RuntimeError):
    """Raised when the distribution cannot be assembled."""


@dataclass
class DistBuildReport:
    dest: Path
    copied: List[str] = field(default_factory=list)
    etc_copied: bool = False


def strip_dist_prefix(contents: str) -> str:
    """Drop ``dist/`` from manifest paths; the manifest is published from inside dist."""

    return contents.replace(DIST_PREFIX, "")


class DistBuildService:
    def __init__(self, settings: RuntimeSettings = SETTINGS, *, project_root: Path | None = None) -> None:
        self._settings = settings
        self._project_root = Path(project_root or os.getcwd())

    def build(self, *, dest: str = "dist", root: str | None = None, files: Sequence[str] = ()) -> DistBuildReport:
        manifest = self._project_root / PACKAGE_MANIFEST
        if not file_exists(manifest):
            raise DistBuildError(f"Cannot build distribution: {manifest} not found")

        dest_dir = self._project_root / dest
        dest_dir.mkdir(parents=True, exist_ok=True)
        report = DistBuildReport(dest=dest_dir)

        # dict.fromkeys keeps first-seen order while collapsing duplicates
        for name in dict.fromkeys([*ALWAYS_COPY, *files]):
            source = self._project_root / name
            if path_exists(source):
                copy_path(source, Path(os.path.normpath(dest_dir / name)))
                report.copied.append(name)

        etc_source = (self._project_root / root / "etc") if root else (self._project_root / "etc")
        if dir_exists(etc_source):
            copy_path(etc_source, dest_dir / "etc")
            report.etc_copied = True

        filter_file(manifest, dest_dir / PACKAGE_MANIFEST, strip_dist_prefix)

        record_event(
            self._settings,
            "dist.build",
            {"dest": str(dest_dir), "copied": report.copied, "etc": report.etc_copied},
        )
        return report
