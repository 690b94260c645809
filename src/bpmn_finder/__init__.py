"""Find sub-process references and script/condition text in BPMN files."""

from bpmn_finder.core.importer.loader import load_source_dir
from bpmn_finder.core.search.searcher import find_references, search_documents, search_text
from bpmn_finder.models.match import ElementKind, Match, Result, SearchMode, SearchOutcome

__all__ = [
    "ElementKind",
    "Match",
    "Result",
    "SearchMode",
    "SearchOutcome",
    "find_references",
    "load_source_dir",
    "search_documents",
    "search_text",
]
