"""Distribution assembly service."""

from .service import ALWAYS_COPY, DistBuildError, DistBuildReport, DistBuildService

__all__ = ["ALWAYS_COPY", "DistBuildError", "DistBuildReport", "DistBuildService"]
