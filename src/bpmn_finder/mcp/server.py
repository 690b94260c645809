"""MCP server exposing BPMN reference and text search tools."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from bpmn_finder.config import RESULTS_PER_PAGE, resolve_source_directory
from bpmn_finder.core.importer.loader import load_source_dir
from bpmn_finder.core.search.filtering import clamp_window, filter_results, paginate
from bpmn_finder.core.search.grouping import highlight_targets
from bpmn_finder.core.search.searcher import search_documents
from bpmn_finder.models.match import Result, SearchMode

# Concise output truncates matched text to this many characters.
_SNIPPET_LENGTH = 200


def _error(message: str) -> dict[str, Any]:
    return {"error": message, "results": [], "count": 0, "total": 0}


def serialize_result(result: Result, *, response_format: str = "concise") -> dict[str, Any]:
    """Turn a grouped result into a JSON-ready dict."""
    detailed = response_format == "detailed"
    matches = []
    for m in result.matches:
        text = m.matched_text
        if text is not None and not detailed:
            text = text[:_SNIPPET_LENGTH]
        matches.append(
            {
                "element_id": m.element_id,
                "element_kind": str(m.element_kind),
                "label": m.label,
                "matched_text": text,
            }
        )

    entry: dict[str, Any] = {
        "path": result.path,
        "folder_path": result.folder_path,
        "file_name": result.file_name,
        "process_name": result.process_name,
        "match_count": len(matches),
        "matches": matches,
        "highlights": highlight_targets(result),
    }
    if detailed:
        entry["content"] = result.content
    return entry


def _run_search(
    source_dir: Path,
    *,
    mode: SearchMode,
    query: str,
    filter_text: str,
    limit: int,
    offset: int,
    response_format: str,
) -> dict[str, Any]:
    if not query:
        return _error("No search query provided.")
    if not source_dir.is_dir():
        return _error(f"Source directory '{source_dir}' not found.")

    limit, offset = clamp_window(limit, offset)
    outcome = search_documents(load_source_dir(source_dir), mode=mode, query=query)
    filtered = filter_results(outcome.results, filter_text)
    page, total = paginate(filtered, limit=limit, offset=offset)

    output: dict[str, Any] = {
        "results": [serialize_result(r, response_format=response_format) for r in page],
        "count": len(page),
        "total": total,
        "documents_scanned": outcome.documents_scanned,
        "failures": [{"path": f.path, "reason": f.reason} for f in outcome.failures],
        "has_more": offset + len(page) < total,
    }
    if output["has_more"]:
        output["next_offset"] = offset + limit
    return output


# --- Core functions (testable without MCP context) ---


def bpmn_find_references(
    source_dir: Path,
    *,
    process_id: str,
    filter_text: str = "",
    limit: int = RESULTS_PER_PAGE,
    offset: int = 0,
    response_format: str = "concise",
) -> dict[str, Any]:
    """Find call activities invoking a process id.

    Args:
        source_dir: Directory with .bpmn/.xml files.
        process_id: Called element to look for (exact, case-sensitive).
        filter_text: Narrow results by folder, file or process name.
        limit: Max results (1-50, default 10).
        offset: Pagination offset.
        response_format: "concise" or "detailed" (adds raw XML content).
    """
    return _run_search(
        source_dir,
        mode=SearchMode.REFERENCE,
        query=process_id,
        filter_text=filter_text,
        limit=limit,
        offset=offset,
        response_format=response_format,
    )


def bpmn_search_text(
    source_dir: Path,
    *,
    text: str,
    filter_text: str = "",
    limit: int = RESULTS_PER_PAGE,
    offset: int = 0,
    response_format: str = "concise",
) -> dict[str, Any]:
    """Find text in scripts, call activities and condition expressions.

    Args:
        source_dir: Directory with .bpmn/.xml files.
        text: Fragment to look for (case-insensitive).
        filter_text: Narrow results by folder, file or process name.
        limit: Max results (1-50, default 10).
        offset: Pagination offset.
        response_format: "concise" or "detailed" (adds raw XML content).
    """
    return _run_search(
        source_dir,
        mode=SearchMode.TEXT,
        query=text,
        filter_text=filter_text,
        limit=limit,
        offset=offset,
        response_format=response_format,
    )


def bpmn_list_files(source_dir: Path) -> dict[str, Any]:
    """List the files a search would scan."""
    if not source_dir.is_dir():
        return {"error": f"Source directory '{source_dir}' not found.", "files": [], "count": 0}
    sources = load_source_dir(source_dir)
    return {"files": [s.path for s in sources], "count": len(sources)}


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    source_dir: Path


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Resolve the source directory once on startup."""
    source_dir = resolve_source_directory()
    logger.info("Serving BPMN files from {}", source_dir)
    yield ServerContext(source_dir=source_dir)


mcp_server = FastMCP(
    "bpmn-finder",
    instructions="""\
Search a directory of BPMN process definitions.

- bpmn_find_references_tool: which processes call a given sub-process
  (matches callActivity calledElement exactly).
- bpmn_search_text_tool: where a text fragment appears in scripts, script
  tasks, call activity bindings or sequence-flow conditions.

Each result is one file + process with all of its matches. Use filter_text
to narrow by folder, file or process name, and offset to page.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def bpmn_find_references_tool(
    ctx: Context,
    process_id: str,
    filter_text: str = "",
    limit: int = RESULTS_PER_PAGE,
    offset: int = 0,
    response_format: str = "concise",
) -> dict[str, Any]:
    """Find call activities that invoke a process.

    Args:
        process_id: The called process id (exact match).
        filter_text: Narrow by folder path, file name or process name.
        limit: Max results (1-50, default 10).
        offset: Pagination offset.
        response_format: "concise" or "detailed".
    """
    return bpmn_find_references(
        _ctx(ctx).source_dir,
        process_id=process_id,
        filter_text=filter_text,
        limit=limit,
        offset=offset,
        response_format=response_format,
    )


@mcp_server.tool()
async def bpmn_search_text_tool(
    ctx: Context,
    text: str,
    filter_text: str = "",
    limit: int = RESULTS_PER_PAGE,
    offset: int = 0,
    response_format: str = "concise",
) -> dict[str, Any]:
    """Search scripts, call activities and conditions for a text fragment.

    Args:
        text: Case-insensitive text to find.
        filter_text: Narrow by folder path, file name or process name.
        limit: Max results (1-50, default 10).
        offset: Pagination offset.
        response_format: "concise" or "detailed".
    """
    return bpmn_search_text(
        _ctx(ctx).source_dir,
        text=text,
        filter_text=filter_text,
        limit=limit,
        offset=offset,
        response_format=response_format,
    )


@mcp_server.tool()
async def bpmn_list_files_tool(ctx: Context) -> dict[str, Any]:
    """List the BPMN/XML files available for searching."""
    return bpmn_list_files(_ctx(ctx).source_dir)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from bpmn_finder.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
