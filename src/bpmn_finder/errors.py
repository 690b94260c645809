"""Exceptions raised by bpmn-finder."""


class TreeParseError(ValueError):
    """Raised when a document's content cannot be parsed into a tree.

    Carries only the parser's message; the search runner pairs it with the
    document path when recording a failure.
    """
