"""Built-in tidy datasets and validation helpers."""

from __future__ import annotations

from figurebook.data.datasets import DATASETS, list_datasets, load_dataset

__all__ = ["DATASETS", "list_datasets", "load_dataset"]
