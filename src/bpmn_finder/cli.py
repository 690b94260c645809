"""CLI for the BPMN finder (reference search, text search, MCP server)."""

import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from bpmn_finder.config import RESULTS_PER_PAGE, resolve_source_directory
from bpmn_finder.core.importer.loader import load_source_dir
from bpmn_finder.core.search.filtering import clamp_window, filter_results, paginate
from bpmn_finder.core.search.searcher import search_documents
from bpmn_finder.logging_config import configure_logging
from bpmn_finder.models.match import SearchMode

app = typer.Typer(help="Find sub-process calls and script/condition text in BPMN files.")

SourceDirOption = Annotated[
    Path | None,
    typer.Option("--source-dir", "-s", help="Directory with .bpmn/.xml files"),
]
FilterOption = Annotated[
    str,
    typer.Option("--filter", "-f", help="Keep results whose folder, file or process name match"),
]
LimitOption = Annotated[int, typer.Option("--limit", "-n", help="Max results (1-50)")]
OffsetOption = Annotated[int, typer.Option("--offset", "-o", help="Skip this many results")]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _resolve_source(source_dir: Path | None) -> Path:
    src = source_dir or resolve_source_directory()
    if not src.is_dir():
        logger.error("Source directory not found: {}", src)
        raise typer.Exit(1)
    return src


def _run(
    *,
    mode: SearchMode,
    query: str,
    source_dir: Path | None,
    filter_text: str,
    limit: int,
    offset: int,
    output_json: bool,
) -> None:
    if not query:
        logger.error("Empty search query")
        raise typer.Exit(1)
    src = _resolve_source(source_dir)
    limit, offset = clamp_window(limit, offset)

    if output_json:
        from bpmn_finder.mcp.server import bpmn_find_references, bpmn_search_text

        if mode == SearchMode.REFERENCE:
            data = bpmn_find_references(
                src, process_id=query, filter_text=filter_text, limit=limit, offset=offset
            )
        else:
            data = bpmn_search_text(
                src, text=query, filter_text=filter_text, limit=limit, offset=offset
            )
        typer.echo(json.dumps(data, indent=2))
        return

    outcome = search_documents(load_source_dir(src), mode=mode, query=query)
    filtered = filter_results(outcome.results, filter_text)
    page, total = paginate(filtered, limit=limit, offset=offset)

    typer.echo(
        f"Found {total} results in {outcome.documents_scanned} files (showing {len(page)}):\n"
    )
    for r in page:
        typer.echo(f"  [{r.path}] {r.process_name}")
        for m in r.matches:
            typer.echo(f"    - {m.label}  (id={m.element_id})")
        typer.echo()

    for failure in outcome.failures:
        typer.echo(f"  skipped {failure.path}: {failure.reason}", err=True)


@app.command()
def refs(
    process_id: str = typer.Argument(..., help="Called process id to look for"),
    source_dir: SourceDirOption = None,
    filter_text: FilterOption = "",
    limit: LimitOption = RESULTS_PER_PAGE,
    offset: OffsetOption = 0,
    output_json: JsonOption = False,
) -> None:
    """Find call activities that invoke a process."""
    _run(
        mode=SearchMode.REFERENCE,
        query=process_id,
        source_dir=source_dir,
        filter_text=filter_text,
        limit=limit,
        offset=offset,
        output_json=output_json,
    )


@app.command()
def text(
    query: str = typer.Argument(..., help="Text to find (case-insensitive)"),
    source_dir: SourceDirOption = None,
    filter_text: FilterOption = "",
    limit: LimitOption = RESULTS_PER_PAGE,
    offset: OffsetOption = 0,
    output_json: JsonOption = False,
) -> None:
    """Search scripts, call activities and condition expressions for text."""
    _run(
        mode=SearchMode.TEXT,
        query=query,
        source_dir=source_dir,
        filter_text=filter_text,
        limit=limit,
        offset=offset,
        output_json=output_json,
    )


@app.command()
def files(
    source_dir: SourceDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """List the files a search would scan."""
    src = _resolve_source(source_dir)
    sources = load_source_dir(src)
    if output_json:
        data = {"files": [s.path for s in sources], "count": len(sources)}
        typer.echo(json.dumps(data, indent=2))
        return
    typer.echo(f"{len(sources)} files:\n")
    for s in sources:
        typer.echo(f"  {s.path}")


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from bpmn_finder.mcp.server import run_mcp_server

    run_mcp_server()
