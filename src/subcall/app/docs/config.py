"""Project configuration for documentation builds (``subcall.yaml``)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import jsonschema
import yaml

from subcall.app.docs.entry_points import DEFAULT_EXCLUSIONS, DEFAULT_INCLUSIONS, INDEX_FILENAME
from subcall.resources import load_schema

PROJECT_CONFIG = "subcall.yaml"
CONFIG_SECTION = "build-docs"
DEFAULT_GENERATOR = "typedoc"


class DocsConfigError(RuntimeError):
    """Raised when the project configuration cannot be used."""


@dataclass(frozen=True)
class DocsBuildConfig:
    src: str | None = None
    include: tuple[str, ...] = DEFAULT_INCLUSIONS
    exclude: tuple[str, ...] = DEFAULT_EXCLUSIONS
    index: str = INDEX_FILENAME
    prefer_index: bool = True
    generator: str = DEFAULT_GENERATOR

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DocsBuildConfig":
        defaults = cls()
        return cls(
            src=data.get("src", defaults.src),
            include=tuple(data.get("include", defaults.include)),
            exclude=tuple(data.get("exclude", defaults.exclude)),
            index=data.get("index", defaults.index),
            prefer_index=data.get("prefer_index", defaults.prefer_index),
            generator=data.get("generator", defaults.generator),
        )


def load_docs_config(project_root: Path, path: Path | None = None) -> DocsBuildConfig:
    """Load the ``build-docs`` section, falling back to defaults when there is no file."""

    config_path = path or (project_root / PROJECT_CONFIG)
    if not config_path.exists():
        return DocsBuildConfig()
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise DocsConfigError(f"Failed to parse {config_path}: {exc}") from exc
    validator = jsonschema.Draft202012Validator(load_schema("docs-config.schema.json"))
    error = jsonschema.exceptions.best_match(validator.iter_errors(raw))
    if error is not None:
        location = "/".join(str(part) for part in error.absolute_path) or "<root>"
        raise DocsConfigError(f"Invalid {config_path} at {location}: {error.message}")
    return DocsBuildConfig.from_dict(raw.get(CONFIG_SECTION) or {})
