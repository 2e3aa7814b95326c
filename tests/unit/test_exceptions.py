"""Tests for the figurebook exception hierarchy."""

from __future__ import annotations

import pytest

from figurebook.exceptions import (
    ConfigError,
    DataValidationError,
    ExportError,
    FigurebookError,
    RenderError,
)


class TestExceptionHierarchy:
    """Every domain error is catchable as FigurebookError."""

    @pytest.mark.parametrize(
        "exc_type", [ConfigError, DataValidationError, RenderError, ExportError]
    )
    def test_subclass_of_base(self, exc_type: type[Exception]) -> None:
        assert issubclass(exc_type, FigurebookError)

    def test_base_is_exception(self) -> None:
        assert issubclass(FigurebookError, Exception)

    def test_message_preserved(self) -> None:
        with pytest.raises(FigurebookError, match="no rows"):
            raise DataValidationError("no rows")

    def test_siblings_are_distinct(self) -> None:
        assert not issubclass(ConfigError, RenderError)
        assert not issubclass(ExportError, DataValidationError)
