from __future__ import annotations

from pathlib import Path

import pytest

from subcall.app.docs.entry_points import (
    EntryPointRecord,
    GlobRuleSet,
    SourceRootError,
    compile_glob,
    default_source_root,
    prefer_index_files,
    relative_to_cwd,
    resolve_entry_points,
)


def _touch(root: Path, *names: str) -> None:
    for name in names:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("export {};\n", encoding="utf-8")


@pytest.fixture
def nested_tree(tmp_path: Path) -> Path:
    _touch(tmp_path, "a/b/index.ts", "a/b/widget.ts", "a/index.ts")
    return tmp_path


def test_deeper_sources_first_and_indexes_last(nested_tree: Path) -> None:
    result = resolve_entry_points(nested_tree, ["**/*.ts"], [], prefer_index=False, cwd=nested_tree)
    assert result == ["a/b/widget.ts", "a/b/index.ts", "a/index.ts"]


def test_prefer_index_lets_index_represent_its_directory(nested_tree: Path) -> None:
    result = resolve_entry_points(nested_tree, ["**/*.ts"], [], prefer_index=True, cwd=nested_tree)
    assert result == ["a/b/index.ts", "a/index.ts"]


def test_directories_without_index_are_unaffected(tmp_path: Path) -> None:
    _touch(tmp_path, "src/lib/util.ts", "src/lib/other.ts", "src/index.ts", "src/main.ts")
    result = resolve_entry_points("src", ["**/*.ts"], [], prefer_index=True, cwd=tmp_path)
    assert result == ["src/lib/other.ts", "src/lib/util.ts", "src/index.ts"]


def test_exclusions_win_over_inclusions(tmp_path: Path) -> None:
    _touch(tmp_path, "src/x.ts", "src/x.spec.ts")
    result = resolve_entry_points("src", ["**/*.ts"], ["**/*.spec.ts"], cwd=tmp_path)
    assert result == ["src/x.ts"]


def test_empty_inclusions_match_nothing(nested_tree: Path) -> None:
    assert resolve_entry_points(nested_tree, [], [], cwd=nested_tree) == []


def test_overlapping_inclusions_do_not_duplicate(tmp_path: Path) -> None:
    _touch(tmp_path, "src/a.ts")
    result = resolve_entry_points("src", ["**/*.ts", "src/*", "**/a.ts"], [], cwd=tmp_path)
    assert result == ["src/a.ts"]


def test_ties_keep_walk_order(tmp_path: Path) -> None:
    _touch(tmp_path, "src/p/zeta.ts", "src/q/alpha.ts", "src/p/beta.ts")
    result = resolve_entry_points("src", ["**/*.ts"], [], cwd=tmp_path)
    assert result == ["src/p/beta.ts", "src/p/zeta.ts", "src/q/alpha.ts"]


def test_directories_are_never_yielded(tmp_path: Path) -> None:
    (tmp_path / "src" / "folder.ts").mkdir(parents=True)
    _touch(tmp_path, "src/folder.ts/inner.ts")
    assert resolve_entry_points("src", ["**/*.ts"], [], cwd=tmp_path) == ["src/folder.ts/inner.ts"]


def test_symlinked_source_root_keeps_relative_paths(tmp_path: Path) -> None:
    project = tmp_path / "project"
    project.mkdir()
    _touch(tmp_path, "shared/a/x.ts")
    (project / "src").symlink_to(tmp_path / "shared", target_is_directory=True)

    assert resolve_entry_points("src", ["src/**/*.ts"], [], cwd=project) == ["src/a/x.ts"]
    assert resolve_entry_points("src", ["**/*.ts"], [], cwd=project) == ["src/a/x.ts"]


def test_symlinked_files_are_entry_points(tmp_path: Path) -> None:
    _touch(tmp_path, "vendor/shim.ts", "src/main.ts")
    (tmp_path / "src" / "shim.ts").symlink_to(tmp_path / "vendor" / "shim.ts")
    (tmp_path / "src" / "gone.ts").symlink_to(tmp_path / "vendor" / "missing.ts")

    assert resolve_entry_points("src", ["**/*.ts"], [], cwd=tmp_path) == ["src/main.ts", "src/shim.ts"]


def test_custom_index_name(tmp_path: Path) -> None:
    _touch(tmp_path, "pkg/__init__.py", "pkg/core.py")
    result = resolve_entry_points(
        "pkg", ["**/*.py"], [], prefer_index=True, index_name="__init__.py", cwd=tmp_path
    )
    assert result == ["pkg/__init__.py"]


def test_missing_root_is_a_resolution_error(tmp_path: Path) -> None:
    with pytest.raises(SourceRootError):
        resolve_entry_points("nowhere", ["**/*.ts"], [], cwd=tmp_path)


def test_default_source_root(tmp_path: Path) -> None:
    assert default_source_root("lib", cwd=tmp_path) == "lib"
    with pytest.raises(SourceRootError, match="specify with --src"):
        default_source_root(None, cwd=tmp_path)
    (tmp_path / "src").mkdir()
    assert default_source_root(None, cwd=tmp_path) == "src"


@pytest.mark.parametrize(
    ("pattern", "path", "expected"),
    [
        ("**/*.ts", "x.ts", True),
        ("**/*.ts", "src/deep/x.ts", True),
        ("**/*.ts", "src/x.tsx", False),
        ("**/*.spec.ts", "src/x.spec.ts", True),
        ("**/*.spec.ts", "src/x.ts", False),
        ("src/*.ts", "src/a/b.ts", True),
        ("src/?.ts", "src/a.ts", True),
        ("src/?.ts", "src/ab.ts", False),
        ("src/[ab].ts", "src/b.ts", True),
        ("src/[!ab].ts", "src/b.ts", False),
        ("src/**/index.ts", "src/index.ts", True),
        ("src/**/index.ts", "src/a/b/index.ts", True),
        ("docs/(draft).md", "docs/(draft).md", True),
        ("src/[^a].ts", "src/b.ts", False),
        ("src/[^a].ts", "src/^.ts", True),
        ("src/[a-c].ts", "src/b.ts", True),
        ("src/**/**/x.ts", "src/x.ts", True),
        ("src/**/x.ts", "lib/x.ts", False),
    ],
)
def test_glob_semantics(pattern: str, path: str, expected: bool) -> None:
    assert any(regex.fullmatch(path) for regex in compile_glob(pattern)) is expected


def test_rule_set_compiles_once(tmp_path: Path) -> None:
    rules = GlobRuleSet(("**/*.ts",), ("**/*.d.ts",))
    assert rules.matches("src/a.ts")
    assert not rules.matches("src/a.d.ts")
    assert not rules.matches("src/a.js")
    assert rules == GlobRuleSet(("**/*.ts",), ("**/*.d.ts",))


def test_record_components() -> None:
    record = EntryPointRecord.from_relative("src/a/b/index.ts")
    assert record.directory == "src/a/b"
    assert record.base == "index.ts"
    assert record.stem == "index"
    assert record.extension == ".ts"
    assert record.depth == 3
    assert record.is_index
    top = EntryPointRecord.from_relative("main.ts")
    assert top.depth == 0
    assert not top.is_index


def test_prefer_index_files_only_touches_indexed_directories() -> None:
    records = [EntryPointRecord.from_relative(path) for path in ("a/x.ts", "a/index.ts", "b/y.ts")]
    assert [record.path for record in prefer_index_files(records)] == ["a/index.ts", "b/y.ts"]


def test_relative_to_cwd(tmp_path: Path) -> None:
    assert relative_to_cwd(tmp_path / "src" / "a.ts", tmp_path) == "src/a.ts"
    outside = Path("/opt/elsewhere/a.ts")
    assert relative_to_cwd(outside, tmp_path) == "/opt/elsewhere/a.ts"
