"""subcall sub-command: build-docs."""

from __future__ import annotations

import argparse
import sys

from subcall.app.docs import HTML, MARKDOWN, DocsBuildService, DocsConfigError, SourceRootError, load_docs_config
from subcall.plugins import OptionsBuilder, SubCommand

STRATEGIES = ("resolve", "expand", "packages")


class SubCommandBuildDocs(SubCommand):
    """Build API documentation from the project sources."""

    def name(self) -> str:
        return "build-docs"

    def description(self) -> str:
        return "Build the documentation from source"

    def create(self) -> OptionsBuilder:
        def options(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
            parser.add_argument(
                "-e",
                "--entry-point",
                dest="entry_points",
                action="append",
                default=[],
                help="The entry point(s) to be documented",
            )
            parser.add_argument(
                "--strategy",
                choices=STRATEGIES,
                default=None,
                help="Strategy to use when resolving dependencies (default: the generator config)",
            )
            parser.add_argument("-s", "--src", default=None, help="Source code directory")
            parser.add_argument(
                "--html",
                action=argparse.BooleanOptionalAction,
                default=True,
                help="Generate HTML documentation",
            )
            parser.add_argument(
                "--markdown",
                action=argparse.BooleanOptionalAction,
                default=True,
                help="Generate Markdown documentation",
            )
            parser.add_argument(
                "--prefer-index",
                action=argparse.BooleanOptionalAction,
                default=None,
                help="Use an index file in preference to the other sources in its directory (default: on)",
            )
            return parser

        return options

    def run(self, args: argparse.Namespace) -> int:
        service = DocsBuildService()
        try:
            config = load_docs_config(service.project_root)
        except DocsConfigError as exc:
            print(str(exc), file=sys.stderr)
            return 1

        entry_points = list(args.entry_points)
        if not entry_points:
            try:
                entry_points = service.default_entry_points(config, src=args.src, prefer_index=args.prefer_index)
            except SourceRootError as exc:
                print(str(exc), file=sys.stderr)
                return 1

        formats = [docs_format for docs_format, enabled in ((HTML, args.html), (MARKDOWN, args.markdown)) if enabled]
        return service.build(config, entry_points, formats=formats, strategy=args.strategy)


default = SubCommandBuildDocs()
