"""
DocDig CLI Application.

Provides a command-line interface for staging the native payload during a
build and for extracting text from documents.

Stdout carries only build directives (for `stage`) or extracted text;
diagnostics go to stderr.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from doc_dig.config import ConfigurationError, Settings, get_settings
from doc_dig.extractors import (
    ExtractionError,
    extract_bytes,
    extract_file,
    extract_file_ocr,
    extract_url,
)
from doc_dig.logging_setup import configure_logging
from doc_dig.models import ArtifactDescriptor, ExtractedDocument
from doc_dig.native import (
    ArtifactLocator,
    ArtifactStager,
    NativeBuildError,
    NativeStagingPipeline,
    emit_directives,
    resolve_platform,
)

# Create Typer app
app = typer.Typer(
    name="doc-dig",
    help="Native payload staging and document text extraction",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _load_settings(**overrides: object) -> Settings:
    """Apply non-empty command-line overrides on top of environment settings."""
    try:
        settings = get_settings()
    except ValidationError as e:
        for error in e.errors():
            setting = ".".join(str(part) for part in error["loc"])
            err_console.print(f"[red]Configuration Error:[/red] {setting}: {escape(error['msg'])}")
        raise typer.Exit(1)

    update = {k: v for k, v in overrides.items() if v is not None}
    if update:
        settings = settings.model_copy(update=update)
    configure_logging(settings.log_level)
    return settings


@app.command()
def stage(
    out_dir: Annotated[
        Optional[Path],
        typer.Option("--out-dir", help="Build output directory (default: $OUT_DIR)"),
    ] = None,
    manifest_dir: Annotated[
        Optional[Path],
        typer.Option("--manifest-dir", help="Native crate directory (default: $CARGO_MANIFEST_DIR)"),
    ] = None,
    staging_dir: Annotated[
        Optional[Path],
        typer.Option("--staging-dir", help="Runtime staging directory (default: <project>/priv/native)"),
    ] = None,
    target_os: Annotated[
        Optional[str],
        typer.Option("--target-os", help="Target OS (default: $CARGO_CFG_TARGET_OS or host)"),
    ] = None,
) -> None:
    """
    Stage the upstream shared libraries and print the build directives.

    Meant to run from the native crate's build script; every line written
    to stdout is build-tool metadata.
    """
    try:
        settings = _load_settings(
            out_dir=out_dir,
            manifest_dir=manifest_dir,
            staging_dir=staging_dir,
            target_os=target_os,
        )
        report = NativeStagingPipeline.from_settings(settings).run()
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(1)
    except NativeBuildError as e:
        err_console.print(f"[red]Staging Error:[/red] {e}")
        raise typer.Exit(1)

    emit_directives(report)


@app.command()
def locate(
    out_dir: Annotated[
        Optional[Path],
        typer.Option("--out-dir", help="Build output directory (default: $OUT_DIR)"),
    ] = None,
    target_os: Annotated[
        Optional[str],
        typer.Option("--target-os", help="Target OS (default: $CARGO_CFG_TARGET_OS or host)"),
    ] = None,
) -> None:
    """
    Print the path of the upstream primary artifact without staging it.
    """
    settings = _load_settings(out_dir=out_dir, target_os=target_os)
    if settings.out_dir is None:
        err_console.print("[red]Error:[/red] No build output directory (use --out-dir or set OUT_DIR)")
        raise typer.Exit(1)

    descriptor = ArtifactDescriptor.for_platform(
        resolve_platform(settings.target_os),
        stem=settings.artifact_stem,
        dependency_prefix=settings.dependency_prefix,
    )
    try:
        path = ArtifactLocator().locate(settings.out_dir, descriptor)
    except NativeBuildError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    typer.echo(str(path))


@app.command()
def doctor(
    manifest_dir: Annotated[
        Optional[Path],
        typer.Option("--manifest-dir", help="Native crate directory (default: $CARGO_MANIFEST_DIR)"),
    ] = None,
    staging_dir: Annotated[
        Optional[Path],
        typer.Option("--staging-dir", help="Runtime staging directory"),
    ] = None,
    target_os: Annotated[
        Optional[str],
        typer.Option("--target-os", help="Target OS (default: $CARGO_CFG_TARGET_OS or host)"),
    ] = None,
) -> None:
    """
    Show the resolved platform and whether the native payload is staged.
    """
    try:
        settings = _load_settings(
            manifest_dir=manifest_dir,
            staging_dir=staging_dir,
            target_os=target_os,
        )
        pipeline = NativeStagingPipeline.from_settings(settings)
        resolved_dir = settings.resolve_staging_dir()
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(1)

    staged = ArtifactStager(pipeline.descriptor).is_staged(resolved_dir)

    table = Table(title="Native Payload")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Platform family", pipeline.platform.family.value)
    table.add_row("Library extension", f".{pipeline.platform.library_extension}")
    table.add_row("$ORIGIN rpath", "yes" if pipeline.platform.supports_origin_rpath else "no")
    table.add_row("Primary artifact", pipeline.descriptor.primary_filename)
    table.add_row("Staging directory", str(resolved_dir))
    table.add_row("Staged", "[green]yes[/green]" if staged else "[yellow]no[/yellow]")
    console.print(table)


@app.command()
def extract(
    source: Annotated[str, typer.Argument(help="File path, URL (with --url), or '-' for stdin")],
    url: Annotated[
        bool,
        typer.Option("--url", help="Treat SOURCE as a URL to fetch"),
    ] = False,
    ocr: Annotated[
        bool,
        typer.Option("--ocr", help="Force OCR for PDF files"),
    ] = False,
    lang: Annotated[
        Optional[str],
        typer.Option("--lang", "-l", help="Tesseract language code for --ocr"),
    ] = None,
    metadata: Annotated[
        bool,
        typer.Option("--metadata", "-m", help="Print document metadata to stderr"),
    ] = False,
) -> None:
    """
    Extract text from a document and print it to stdout.
    """
    if (url or source == "-") and (ocr or lang is not None):
        raise typer.BadParameter("--ocr and --lang apply to file paths only, not to --url or stdin")

    _load_settings()
    try:
        if url:
            document = extract_url(source)
        elif source == "-":
            document = extract_bytes(typer.get_binary_stream("stdin").read())
        elif ocr:
            document = extract_file_ocr(Path(source), language=lang)
        else:
            document = extract_file(Path(source))
    except ExtractionError as e:
        err_console.print(f"[red]Extraction Error:[/red] {e}")
        raise typer.Exit(1)

    if document.is_empty:
        err_console.print(f"[yellow]Warning:[/yellow] No text extracted from {document.source}")

    if metadata:
        _display_metadata(document)

    typer.echo(document.content)


def _display_metadata(document: ExtractedDocument) -> None:
    """Display document metadata in a formatted table on stderr."""
    table = Table(title=f"Metadata: {document.source}")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key in sorted(document.metadata):
        table.add_row(key, ", ".join(document.metadata[key]))

    err_console.print(table)


if __name__ == "__main__":
    app()
