"""Tests for page build errors."""

from __future__ import annotations

import pytest

from storytree.engine.errors import PageBuildError


class TestPageBuildError:
    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="Page 3 could not be built"):
            raise PageBuildError(page_id=3, problems=["bad shape"])

    def test_message_joins_problems(self) -> None:
        error = PageBuildError(page_id=5, problems=["first", "second"])

        assert str(error) == "Page 5 could not be built: first; second"

    def test_message_without_problems(self) -> None:
        assert str(PageBuildError(page_id=2)) == "Page 2 could not be built"

    def test_to_feedback(self) -> None:
        error = PageBuildError(page_id=4, problems=["Ending pages must have no choices"])

        feedback = error.to_feedback()

        assert "## Page Build Error" in feedback
        assert "**Page**: 4" in feedback
        assert "  - Ending pages must have no choices" in feedback
