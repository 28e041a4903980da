# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Analyzer package for the documentation build pipeline."""

from docpipe.analyzers.python import PythonAnalyzer

__all__ = ["PythonAnalyzer"]
