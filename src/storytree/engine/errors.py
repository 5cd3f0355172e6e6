"""Page construction error types.

Cross-reference problems in upstream deltas (unknown thread, promise or
entry IDs) are never errors: they are dropped and logged. The errors here
cover the page's own shape, which the engine is strict about.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class PageBuildError(ValueError):
    """Raised when the assembled page would violate its own shape.

    Attributes:
        page_id: ID of the page being built.
        problems: One human-readable line per violation.
    """

    page_id: int
    problems: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.problems:
            return f"Page {self.page_id} could not be built"
        return f"Page {self.page_id} could not be built: " + "; ".join(self.problems)

    def to_feedback(self) -> str:
        """Format as feedback for the collaborator that produced the inputs."""
        lines = [
            "## Page Build Error",
            "",
            f"**Page**: {self.page_id}",
            "",
            "**Problems**:",
        ]
        lines.extend(f"  - {problem}" for problem in self.problems)
        return "\n".join(lines)
