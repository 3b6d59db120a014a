"""Drive the external documentation generator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Sequence

from subcall.app.docs.config import DocsBuildConfig
from subcall.app.docs.entry_points import default_source_root, resolve_entry_points
from subcall.settings import SETTINGS, RuntimeSettings
from subcall.utils.fs import file_exists
from subcall.utils.process import execute_command
from subcall.utils.telemetry import record_event

HTML_CONFIG = Path("docs") / "html-config.cjs"
MARKDOWN_CONFIG = Path("docs") / "markdown-config.cjs"

Executor = Callable[..., int]


@dataclass(frozen=True)
class DocsFormat:
    label: str
    config: Path


HTML = DocsFormat(label="HTML", config=HTML_CONFIG)
MARKDOWN = DocsFormat(label="Markdown", config=MARKDOWN_CONFIG)


def entry_point_args(entry_points: Sequence[str]) -> list[str]:
    args: list[str] = []
    for entry_point in entry_points:
        args.extend(["--entryPoints", entry_point])
    return args


class DocsBuildService:
    """Resolve entry points and run the generator once per enabled format."""

    def __init__(
        self,
        settings: RuntimeSettings = SETTINGS,
        *,
        project_root: Path | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._settings = settings
        self._project_root = Path(project_root or os.getcwd())
        self._executor = executor or execute_command

    @property
    def project_root(self) -> Path:
        return self._project_root

    def default_entry_points(self, config: DocsBuildConfig, *, src: str | None = None, prefer_index: bool | None = None) -> list[str]:
        """Figure out the entry points when none were given explicitly."""

        source_root = default_source_root(src or config.src, cwd=self._project_root)
        return resolve_entry_points(
            source_root,
            config.include,
            config.exclude,
            prefer_index=config.prefer_index if prefer_index is None else prefer_index,
            index_name=config.index,
            cwd=self._project_root,
        )

    def build(
        self,
        config: DocsBuildConfig,
        entry_points: Sequence[str],
        *,
        formats: Sequence[DocsFormat] = (HTML, MARKDOWN),
        strategy: str | None = None,
    ) -> int:
        extra = entry_point_args(entry_points)
        if strategy:
            extra = ["--entryPointStrategy", strategy, *extra]
        code = 0
        for docs_format in formats:
            code = self._generate(config, docs_format, extra)
            if code != 0:
                break
        record_event(
            self._settings,
            "docs.build",
            {
                "formats": [docs_format.label for docs_format in formats],
                "entry_points": len(entry_points),
                "exit_code": code,
            },
        )
        return code

    def _generate(self, config: DocsBuildConfig, docs_format: DocsFormat, extra: list[str]) -> int:
        # A format without a configuration file is skipped, not an error
        if not file_exists(self._project_root / docs_format.config):
            print(f"Skipping {docs_format.label} generation due to missing config file")
            return 0
        print(f"Generating {docs_format.label} documentation")
        return self._executor(
            config.generator,
            ["--options", docs_format.config.as_posix(), *extra],
            cwd=self._project_root,
        )
