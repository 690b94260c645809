"""Domain models for the BPMN finder."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

# A parsed XML element: tag -> nested node, list of nodes, or scalar text.
TreeNode = dict[str, Any]


class ElementKind(StrEnum):
    """Process elements the detectors know how to match."""

    CALL_ACTIVITY = "callActivity"
    SCRIPT_TASK = "scriptTask"
    SCRIPT = "script"
    CONDITION_EXPRESSION = "conditionExpression"


class SearchMode(StrEnum):
    """Reference lookup by called process id, or free-text content search."""

    REFERENCE = "reference"
    TEXT = "text"


@dataclass(frozen=True)
class SourceFile:
    """Raw file handed to the search engine by a loader."""

    path: str
    content: str


@dataclass(frozen=True)
class Document:
    """A parsed process-definition file."""

    folder_path: str
    file_name: str
    content: str
    tree: TreeNode = field(compare=False, repr=False)

    @property
    def path(self) -> str:
        return f"{self.folder_path}/{self.file_name}" if self.folder_path else self.file_name


def split_path(path: str) -> tuple[str, str]:
    """Split a relative path on ``/`` into (folder_path, file_name)."""
    *folders, file_name = path.split("/")
    return "/".join(folders), file_name


@dataclass(frozen=True)
class Match:
    """A single detector hit inside a document."""

    element_id: str
    element_kind: ElementKind
    label: str
    matched_text: str | None = None


@dataclass(frozen=True)
class Result:
    """All matches for one (document, process name) pair."""

    folder_path: str
    file_name: str
    content: str
    process_name: str
    matches: tuple[Match, ...]

    @property
    def path(self) -> str:
        return f"{self.folder_path}/{self.file_name}" if self.folder_path else self.file_name

    @property
    def group_key(self) -> tuple[str, str, str]:
        return (self.folder_path, self.file_name, self.process_name)


@dataclass(frozen=True)
class ParseFailure:
    """A document that could not be searched."""

    path: str
    reason: str


@dataclass(frozen=True)
class SearchOutcome:
    """Grouped results of a search run plus per-document diagnostics."""

    results: tuple[Result, ...]
    failures: tuple[ParseFailure, ...] = ()
    documents_scanned: int = 0

    @property
    def match_count(self) -> int:
        return sum(len(r.matches) for r in self.results)
