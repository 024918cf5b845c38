"""Diagnostics report for the connectivity screen."""

from fitcoach.diagnostics.report import DiagnosticsReport, DiagnosticsService, ProbeResult

__all__ = ["DiagnosticsReport", "DiagnosticsService", "ProbeResult"]
