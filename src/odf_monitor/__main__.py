"""CLI entry point for odf-monitor."""

import logging
import re
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import click
import yaml

from .config import load_settings, parse_mongo_uri
from .domain.errors import OdfMonitorError
from .domain.models import (
    ComparisonMode,
    DocumentFilters,
    OdfDocument,
    Pagination,
    StructuredComparison,
)
from .domain.query import parse_date_bound
from .domain.services import OdfDocumentService
from .factory import create_document_service

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def parse_date_range(date_range: str) -> tuple[datetime | None, datetime | None]:
    """Parse YYYY-MM-DD..YYYY-MM-DD into (start, end). Either side may be empty.

    The end bound covers the whole day.
    """
    if ".." not in date_range:
        raise click.BadParameter("Date range must be YYYY-MM-DD..YYYY-MM-DD")
    start, end = date_range.split("..", 1)
    if not start and not end:
        raise click.BadParameter("Date range needs at least one bound")
    for bound in (start, end):
        if bound and not DATE_PATTERN.match(bound):
            raise click.BadParameter("Date range must be YYYY-MM-DD..YYYY-MM-DD")
    if start and end and start > end:
        raise click.BadParameter("Start date must be before end date")

    try:
        date_from = parse_date_bound(start) if start else None
        date_to = parse_date_bound(end, end_of_day=True) if end else None
    except ValueError as e:
        raise click.BadParameter(f"Invalid date in range: {e}") from e
    return date_from, date_to


def build_pagination(page: int | None, page_size: int | None) -> Pagination | None:
    """Pagination applies only when both values are given."""
    if page is None and page_size is None:
        return None
    if page is None or page_size is None:
        raise click.UsageError("--page and --page-size must be used together")
    return Pagination(page=page, page_size=page_size)


def document_summary(document: OdfDocument, with_content: bool = False) -> dict[str, Any]:
    data = asdict(document)
    if not with_content:
        data.pop("content")
    return {key: value for key, value in data.items() if value is not None}


def emit(data: Any) -> None:
    click.echo(yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False))


def run(action: Callable[[], Any]) -> Any:
    """Run a service call, turning domain errors into a non-zero exit."""
    try:
        return action()
    except OdfMonitorError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def get_service(ctx: click.Context, mode: ComparisonMode | None = None) -> OdfDocumentService:
    settings = load_settings(ctx.obj["config_path"])
    return create_document_service(settings, mode=mode)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-c", "--config", type=click.Path(exists=True), help="Config file path")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """ODF Monitor - query and compare ODF result documents."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None


@cli.command("list")
@click.option("--competition-code", help="Exact competition code")
@click.option("--document-code", help="Substring of the document code")
@click.option("--document-type", help="Exact document type")
@click.option("--document-subtype", help="Exact document subtype")
@click.option("--discipline", help="3-letter discipline (overrides --document-code)")
@click.option("--filter-date", help="YYYY-MM-DD..YYYY-MM-DD, either side optional")
@click.option("--page", type=click.IntRange(min=1), help="Page number (1-based)")
@click.option("--page-size", type=click.IntRange(min=1), help="Documents per page")
@click.option("--content", "with_content", is_flag=True, help="Include document content")
@click.pass_context
def list_documents(
    ctx: click.Context,
    competition_code: str | None,
    document_code: str | None,
    document_type: str | None,
    document_subtype: str | None,
    discipline: str | None,
    filter_date: str | None,
    page: int | None,
    page_size: int | None,
    with_content: bool,
) -> None:
    """List documents, newest first."""
    date_from, date_to = parse_date_range(filter_date) if filter_date else (None, None)
    filters = DocumentFilters(
        competition_code=competition_code,
        document_code=document_code,
        document_type=document_type,
        document_subtype=document_subtype,
        discipline=discipline,
        date_from=date_from,
        date_to=date_to,
    )
    pagination = build_pagination(page, page_size)

    service = get_service(ctx)
    result = run(lambda: service.list_documents(filters, pagination))

    emit(
        {
            "total": result.total,
            "page": result.page,
            "page_size": result.page_size,
            "documents": [document_summary(d, with_content) for d in result.items],
        }
    )


@cli.command()
@click.argument("document_id")
@click.pass_context
def get(ctx: click.Context, document_id: str) -> None:
    """Show a single document."""
    service = get_service(ctx)
    document = run(lambda: service.get_document(document_id))
    emit(document_summary(document, with_content=True))


@cli.command()
@click.argument("document_id")
@click.pass_context
def parsed(ctx: click.Context, document_id: str) -> None:
    """Show a document's content parsed from XML or JSON."""
    service = get_service(ctx)
    emit(run(lambda: service.get_parsed_content(document_id)))


@cli.command("by-code")
@click.argument("document_code")
@click.pass_context
def by_code(ctx: click.Context, document_code: str) -> None:
    """Find documents whose code contains DOCUMENT_CODE."""
    service = get_service(ctx)
    documents = run(lambda: service.find_by_document_code(document_code))
    emit([document_summary(d) for d in documents])


@cli.command()
@click.pass_context
def disciplines(ctx: click.Context) -> None:
    """List disciplines with XML documents."""
    service = get_service(ctx)
    for code in run(service.list_disciplines):
        click.echo(code)


@cli.command()
@click.argument("document1_id")
@click.argument("document2_id")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in ComparisonMode]),
    help="Override the configured comparison mode",
)
@click.pass_context
def compare(ctx: click.Context, document1_id: str, document2_id: str, mode: str | None) -> None:
    """Compare two documents."""
    service = get_service(ctx, mode=ComparisonMode(mode) if mode else None)
    comparison = run(lambda: service.compare_documents(document1_id, document2_id))
    data = asdict(comparison)
    if isinstance(comparison, StructuredComparison):
        data["identical"] = comparison.identical
    emit(data)


@cli.command()
@click.argument("document_id")
@click.option("--backend-url", help="Ingestion backend base URL")
@click.pass_context
def reprocess(ctx: click.Context, document_id: str, backend_url: str | None) -> None:
    """Ask the ingestion backend to reprocess a document."""
    service = get_service(ctx)
    result = run(lambda: service.reprocess_document(document_id, backend_url))
    if result.success:
        click.echo(result.message)
    else:
        click.echo(f"Error: {result.message}", err=True)
        sys.exit(1)


@cli.command("ensure-indexes")
@click.pass_context
def ensure_indexes(ctx: click.Context) -> None:
    """Create the document collection indexes."""
    from .adapters.storage import MongoDocumentStore, connect, get_database

    settings = load_settings(ctx.obj["config_path"])
    database = get_database(connect(settings.mongo), settings.mongo)
    store = MongoDocumentStore(database[settings.mongo.documents_collection])
    for name in run(store.ensure_indexes):
        click.echo(name)


@cli.command()
@click.option("--host", help="Bind address (default from config)")
@click.option("--port", type=int, help="Port (default from config)")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Run the HTTP API."""
    import uvicorn

    from .api import create_app

    settings = load_settings(ctx.obj["config_path"])
    db_host, db_name = parse_mongo_uri(settings.mongo.uri)
    bind_host = host or settings.api.host
    bind_port = port or settings.api.port

    logger.info(f"Database host: {db_host}, database: {settings.mongo.database or db_name}")
    logger.info(f"API: http://{bind_host}:{bind_port}/{settings.api.global_prefix}")
    uvicorn.run(create_app(settings), host=bind_host, port=bind_port)


if __name__ == "__main__":
    cli()
