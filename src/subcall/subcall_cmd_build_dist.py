"""subcall sub-command: build-dist."""

from __future__ import annotations

import argparse
import sys

from subcall.app.dist import DistBuildError, DistBuildService
from subcall.plugins import OptionsBuilder, SubCommand


class SubCommandBuildDist(SubCommand):
    def name(self) -> str:
        return "build-dist"

    def description(self) -> str:
        return "Build the distribution"

    def create(self) -> OptionsBuilder:
        def options(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
            parser.add_argument(
                "-r",
                "--root",
                default=None,
                help="Root directory containing source and auxiliary files",
            )
            parser.add_argument("-d", "--dest", default="dist", help="Directory where to copy artefacts to")
            parser.add_argument(
                "-f",
                "--files",
                nargs="+",
                action="extend",
                default=[],
                help="Additional files to copy into the distribution",
            )
            return parser

        return options

    def run(self, args: argparse.Namespace) -> int:
        try:
            report = DistBuildService().build(dest=args.dest, root=args.root, files=args.files)
        except DistBuildError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        print(f"Distribution written to {report.dest} ({len(report.copied)} files copied)")
        return 0


default = SubCommandBuildDist()
