"""figurebook: declarative static charts for data-visualization chapters."""

from __future__ import annotations

__version__ = "0.1.0"
