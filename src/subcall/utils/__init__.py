"""Filesystem, process and telemetry helpers."""
