"""Documentation build services."""

from .config import DocsBuildConfig, DocsConfigError, load_docs_config
from .entry_points import (
    EntryPointRecord,
    GlobRuleSet,
    SourceRootError,
    resolve_entry_points,
)
from .service import HTML, MARKDOWN, DocsBuildService, DocsFormat

__all__ = [
    "DocsBuildConfig",
    "DocsBuildService",
    "DocsConfigError",
    "DocsFormat",
    "EntryPointRecord",
    "GlobRuleSet",
    "HTML",
    "MARKDOWN",
    "SourceRootError",
    "load_docs_config",
    "resolve_entry_points",
]
