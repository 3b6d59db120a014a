"""Select and order documentation entry points from a source tree.

Entries are emitted so that a generator processing them in sequence sees
deeper, more specific modules before shallower ones, and every index file
(which re-exports its directory) after all plain source files. Entries with
equal index status and depth keep the order in which the tree walk found them,
which is name order within each directory.
"""

from __future__ import annotations

import fnmatch
import itertools
import os
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterable, Sequence

from subcall.utils.fs import dir_exists, find_files

INDEX_FILENAME = "index.ts"
DEFAULT_INCLUSIONS: tuple[str, ...] = ("**/*.ts",)
DEFAULT_EXCLUSIONS: tuple[str, ...] = ("**/*.spec.ts",)
DEFAULT_SOURCE_ROOT = "src"
GLOBSTAR = "**/"


class SourceRootError(RuntimeError):
    """Raised when the source root cannot be determined."""


def compile_glob(pattern: str) -> tuple[re.Pattern[str], ...]:
    """Compile a glob into regular expressions matched against whole paths.

    Matching is :func:`fnmatch.fnmatchcase`, so ``*`` also crosses ``/``.
    Each ``**/`` may additionally match nothing, which lets ``src/**/x.ts``
    accept ``src/x.ts``; the pattern is expanded into one variant per choice.
    """

    pieces = pattern.split(GLOBSTAR)
    variants = dict.fromkeys(
        "".join(piece + joiner for piece, joiner in zip(pieces, (*choice, "")))
        for choice in itertools.product((GLOBSTAR, ""), repeat=len(pieces) - 1)
    )
    return tuple(re.compile(fnmatch.translate(variant)) for variant in variants)


def _compile_all(globs: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    return tuple(regex for glob in globs for regex in compile_glob(glob))


@dataclass(frozen=True)
class GlobRuleSet:
    inclusions: tuple[str, ...]
    exclusions: tuple[str, ...] = ()
    _included: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)
    _excluded: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_included", _compile_all(self.inclusions))
        object.__setattr__(self, "_excluded", _compile_all(self.exclusions))

    def matches(self, relative_path: str) -> bool:
        if not any(regex.fullmatch(relative_path) for regex in self._included):
            return False
        return not any(regex.fullmatch(relative_path) for regex in self._excluded)


@dataclass(frozen=True)
class EntryPointRecord:
    path: str
    directory: str
    base: str
    stem: str
    extension: str
    depth: int
    is_index: bool

    @classmethod
    def from_relative(cls, relative_path: str, *, index_name: str = INDEX_FILENAME) -> "EntryPointRecord":
        pure = PurePosixPath(relative_path)
        return cls(
            path=relative_path,
            directory=pure.parent.as_posix(),
            base=pure.name,
            stem=pure.stem,
            extension=pure.suffix,
            depth=len(pure.parent.parts),
            is_index=pure.name == index_name,
        )


def relative_to_cwd(path: Path, cwd: Path) -> str:
    """Strip a leading ``<cwd>/`` and return the path with POSIX separators."""

    text = str(path)
    prefix = str(cwd) + os.sep
    if text.startswith(prefix):
        text = text[len(prefix) :]
    return text.replace(os.sep, "/")


def default_source_root(src: str | None, *, cwd: Path | None = None) -> str:
    if src:
        return src
    base = Path(cwd or os.getcwd())
    if dir_exists(base / DEFAULT_SOURCE_ROOT):
        return DEFAULT_SOURCE_ROOT
    raise SourceRootError("Cannot workout the source root, specify with --src")


def collect_entry_points(
    root: str | Path,
    rules: GlobRuleSet,
    *,
    index_name: str = INDEX_FILENAME,
    cwd: Path | None = None,
) -> list[EntryPointRecord]:
    """Return a record for every file under ``root`` accepted by ``rules``, in walk order."""

    base_cwd = Path(os.path.abspath(cwd or os.getcwd()))
    source_root = Path(root)
    if not source_root.is_absolute():
        source_root = base_cwd / source_root
    if not dir_exists(source_root):
        raise SourceRootError(f"Source root {root} is not a directory")

    records: list[EntryPointRecord] = []
    for item in find_files(source_root, lambda record: record.is_file()):
        relative_path = relative_to_cwd(item.path, base_cwd)
        if rules.matches(relative_path):
            records.append(EntryPointRecord.from_relative(relative_path, index_name=index_name))
    return records


def prefer_index_files(records: Iterable[EntryPointRecord]) -> list[EntryPointRecord]:
    """Let an index file stand alone for every directory that has one."""

    records = list(records)
    indexed_dirs = {record.directory for record in records if record.is_index}
    return [record for record in records if record.is_index or record.directory not in indexed_dirs]


def order_entry_points(records: Iterable[EntryPointRecord]) -> list[EntryPointRecord]:
    # sorted() is stable: equal keys keep walk order
    return sorted(records, key=lambda record: (record.is_index, -record.depth))


def resolve_entry_points(
    root: str | Path,
    inclusions: Sequence[str],
    exclusions: Sequence[str] = (),
    *,
    prefer_index: bool = False,
    index_name: str = INDEX_FILENAME,
    cwd: Path | None = None,
) -> list[str]:
    """Return the ordered relative paths of the entry points under ``root``."""

    rules = GlobRuleSet(tuple(inclusions), tuple(exclusions))
    records = collect_entry_points(root, rules, index_name=index_name, cwd=cwd)
    if prefer_index:
        records = prefer_index_files(records)
    return [record.path for record in order_entry_points(records)]
