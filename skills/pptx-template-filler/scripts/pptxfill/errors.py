"""Exceptions raised while reading outlines and assembling decks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Union


@dataclass(frozen=True)
class OutlineIssue:
    """One problem in the outline, located by its JSON path (``parts[0].title``).

    An empty path means the problem concerns the input as a whole.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path} {self.message}" if self.path else self.message


class OutlineValidationError(ValueError):
    """The outline cannot drive a generation; ``issues`` lists every problem found."""

    def __init__(self, issues: Iterable[Union[OutlineIssue, str]]):
        self.issues: List[OutlineIssue] = [
            issue if isinstance(issue, OutlineIssue) else OutlineIssue("", str(issue).strip()) for issue in issues
        ]
        self.issues = [issue for issue in self.issues if str(issue)] or [OutlineIssue("", "Invalid outline")]
        noun = "issue" if len(self.issues) == 1 else "issues"
        body = "\n".join(f"- {issue}" for issue in self.issues)
        super().__init__(f"Outline validation failed ({len(self.issues)} {noun}):\n{body}")

    @property
    def paths(self) -> List[str]:
        """JSON paths of the offending nodes, in discovery order."""
        return [issue.path for issue in self.issues if issue.path]


class DeckGenerationError(RuntimeError):
    """Raised when a generation step cannot complete."""


class TemplateContractError(DeckGenerationError):
    """Raised when the template lacks a slide or fragment the outline needs."""
