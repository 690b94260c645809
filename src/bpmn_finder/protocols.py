"""Protocols for dependency injection in the search engine."""

from typing import Protocol, runtime_checkable

from bpmn_finder.models.match import TreeNode


@runtime_checkable
class TreeParserProtocol(Protocol):
    """Protocol for XML-to-tree parsers used by the search runner."""

    def __call__(self, content: str) -> TreeNode:
        """Parse raw text into a tree, raising TreeParseError on malformed input."""
        ...
