"""Search engine: walk each document with the detectors of one search mode."""

from collections.abc import Iterable
from typing import Any

from loguru import logger

from bpmn_finder.core.importer.xml_reader import parse_tree
from bpmn_finder.core.search.detectors import (
    detect_call_activities,
    detect_call_reference,
    detect_condition_expressions,
    detect_script,
    detect_script_tasks,
)
from bpmn_finder.core.search.grouping import group_results
from bpmn_finder.core.search.records import PlaceholderIds, build_result, resolve_process_name
from bpmn_finder.core.tree.walker import as_list, walk
from bpmn_finder.errors import TreeParseError
from bpmn_finder.models.match import (
    Document,
    ElementKind,
    Match,
    ParseFailure,
    Result,
    SearchMode,
    SearchOutcome,
    SourceFile,
    TreeNode,
    split_path,
)
from bpmn_finder.protocols import TreeParserProtocol


class ReferenceVisitor:
    """Collect call activities that invoke one process id."""

    def __init__(self, process_id: str, ids: PlaceholderIds) -> None:
        self.process_id = process_id
        self.ids = ids
        self.matches: list[Match] = []

    def __call__(self, tag: str, raw_key: str, value: Any, node: TreeNode) -> None:
        self.matches.extend(
            detect_call_reference(tag, value, node, process_id=self.process_id, ids=self.ids)
        )


class TextVisitor:
    """Collect script, script task, call activity and condition hits for a text query."""

    def __init__(self, query: str, ids: PlaceholderIds) -> None:
        self.query = query
        self.ids = ids
        self.matches: list[Match] = []
        # Script tasks already inspected; their inner <script> is not reported twice.
        self._script_tasks: set[int] = set()

    def __call__(self, tag: str, raw_key: str, value: Any, node: TreeNode) -> None:
        if tag == ElementKind.SCRIPT:
            if id(node) in self._script_tasks:
                return
            self.matches.extend(detect_script(tag, value, node, query=self.query, ids=self.ids))
        elif tag == ElementKind.SCRIPT_TASK:
            self._script_tasks.update(id(task) for task in as_list(value))
            self.matches.extend(
                detect_script_tasks(tag, value, node, query=self.query, ids=self.ids)
            )
        elif tag == ElementKind.CALL_ACTIVITY:
            self.matches.extend(
                detect_call_activities(tag, value, node, query=self.query, ids=self.ids)
            )
        elif tag == ElementKind.CONDITION_EXPRESSION:
            self.matches.extend(
                detect_condition_expressions(tag, value, node, query=self.query, ids=self.ids)
            )


def load_document(source: SourceFile, *, parser: TreeParserProtocol = parse_tree) -> Document:
    """Parse a source file into a Document.

    Raises:
        TreeParseError: If the parser rejects the content.
    """
    folder_path, file_name = split_path(source.path)
    return Document(
        folder_path=folder_path,
        file_name=file_name,
        content=source.content,
        tree=parser(source.content),
    )


def scan_document(
    document: Document,
    *,
    mode: SearchMode,
    query: str,
    ids: PlaceholderIds,
) -> list[Result]:
    """Run one search mode over a document, returning one result per match."""
    process_name = resolve_process_name(document.tree)
    visitor: ReferenceVisitor | TextVisitor
    if mode == SearchMode.REFERENCE:
        visitor = ReferenceVisitor(query, ids)
    else:
        visitor = TextVisitor(query, ids)
    walk(document.tree, visitor)
    return [build_result(document, process_name, m) for m in visitor.matches]


def search_documents(
    sources: Iterable[SourceFile],
    *,
    mode: SearchMode,
    query: str,
    parser: TreeParserProtocol = parse_tree,
) -> SearchOutcome:
    """Search every source in order and group the hits per document and process.

    A document that fails to parse, or fails while being scanned, is skipped
    and reported in ``failures``; the remaining documents are unaffected.

    Args:
        sources: Files to search, already filtered by path and extension.
        mode: Reference lookup or text search.
        query: Called process id (exact) or text fragment (case-insensitive).
        parser: XML-to-tree parser.

    Returns:
        SearchOutcome with grouped results in document order.
    """
    ids = PlaceholderIds()
    flat: list[Result] = []
    failures: list[ParseFailure] = []
    scanned = 0

    for source in sources:
        scanned += 1
        try:
            document = load_document(source, parser=parser)
            hits = scan_document(document, mode=mode, query=query, ids=ids)
        except TreeParseError as exc:
            logger.warning("Skipping {}: {}", source.path, exc)
            failures.append(ParseFailure(path=source.path, reason=str(exc)))
            continue
        except Exception as exc:
            logger.exception("Failed to search {}", source.path)
            failures.append(ParseFailure(path=source.path, reason=str(exc)))
            continue

        if hits:
            logger.debug("{}: {} matches", source.path, len(hits))
        flat.extend(hits)

    results = group_results(flat)
    logger.info(
        "Search complete: {} documents, {} results, {} matches, {} failed",
        scanned, len(results), len(flat), len(failures),
    )
    return SearchOutcome(
        results=tuple(results),
        failures=tuple(failures),
        documents_scanned=scanned,
    )


def find_references(
    sources: Iterable[SourceFile],
    process_id: str,
    *,
    parser: TreeParserProtocol = parse_tree,
) -> SearchOutcome:
    """Find every call activity that invokes ``process_id``."""
    return search_documents(sources, mode=SearchMode.REFERENCE, query=process_id, parser=parser)


def search_text(
    sources: Iterable[SourceFile],
    text: str,
    *,
    parser: TreeParserProtocol = parse_tree,
) -> SearchOutcome:
    """Find ``text`` in scripts, call activities and condition expressions."""
    return search_documents(sources, mode=SearchMode.TEXT, query=text, parser=parser)
