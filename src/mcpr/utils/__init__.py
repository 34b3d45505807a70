"""Utilities — logging setup and OpenTelemetry helpers."""
