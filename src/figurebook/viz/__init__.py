"""Visualization system for book-quality static charts.

Centralized styling, preset figure dimensions, multi-format export.
Uses Seaborn theming with Paul Tol and Okabe–Ito colorblind-safe palettes.
"""

from __future__ import annotations
