"""CLI entry point for resource extractor."""

import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from .bundle import ResourceBundle, ZipBundle, open_bundle
from .config import ExtractionJob, ExtractionManifest, ExtractorSettings
from .errors import ResourceError
from .extractor import ResourceExtractor
from .results import BatchResult

console = Console()


def setup_logging(level: str, log_file: Optional[Path] = None) -> None:
    """Setup logging configuration."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def _close(bundle: ResourceBundle) -> None:
    if isinstance(bundle, ZipBundle):
        bundle.close()


def _settings_or_exit(**values: Any) -> ExtractorSettings:
    try:
        return ExtractorSettings(**values)
    except ValueError as e:
        click.echo(f"❌ Invalid settings: {e}", err=True)
        sys.exit(1)


def _open_or_exit(source: str, separator: str) -> ResourceBundle:
    try:
        return open_bundle(source, separator=separator)
    except ResourceError as e:
        click.echo(f"❌ Cannot open bundle {source}: {e}", err=True)
        sys.exit(1)


def _print_batch(batch: BatchResult) -> None:
    """Print a table of per-resource outcomes."""
    table = Table(title=f"Extracted to {batch.output_directory}")
    table.add_column("Resource")
    table.add_column("File")
    table.add_column("Bytes", justify="right")
    table.add_column("Status")

    for result in batch.results:
        status = (
            "[green]ok[/green]"
            if result.success
            else f"[red]{result.error_kind.value}[/red]"
        )
        table.add_row(
            result.resource_name,
            result.file_name,
            f"{result.bytes_written:,}",
            status,
        )

    console.print(table)
    if batch.error_kind is not None:
        click.echo(f"❌ {batch.error_message}", err=True)
    for result in batch.failed:
        click.echo(f"  • {result.resource_name}: {result.error_message}", err=True)


def _run_job(
    job: ExtractionJob, settings: ExtractorSettings
) -> Tuple[Optional[BatchResult], bool]:
    """Run one manifest job; returns the batch (if any) and overall success."""
    try:
        bundle = open_bundle(job.source, separator=settings.separator)
    except ResourceError as e:
        click.echo(f"❌ Cannot open bundle {job.source}: {e}", err=True)
        return None, False

    try:
        extractor = ResourceExtractor(settings)
        if job.files:
            batch = extractor.extract_list(
                bundle, job.prefix, job.files, job.output_directory
            )
        else:
            batch = extractor.extract_all(bundle, job.prefix, job.output_directory)
    finally:
        _close(bundle)

    return batch, batch.success


@click.group()
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: WARNING, or the manifest's level for run)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write log records to this file",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], log_file: Optional[Path]) -> None:
    """Resource Extractor - copy embedded resources out to plain files."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    setup_logging(log_level or "WARNING", log_file)


@cli.command("list")
@click.argument("source")
@click.option("--prefix", "-p", default="", help="Only show names under this prefix")
@click.option("--separator", default=".", show_default=True, help="Name separator")
def list_resources(source: str, prefix: str, separator: str) -> None:
    """List embedded resource names in SOURCE (package name or archive)."""
    settings = _settings_or_exit(separator=separator)
    bundle = _open_or_exit(source, separator)

    try:
        names = bundle.list_names()
    except ResourceError as e:
        click.echo(f"❌ Failed to list resources: {e}", err=True)
        sys.exit(1)
    finally:
        _close(bundle)

    table = Table(title=f"Resources in {source}")
    table.add_column("Name")
    table.add_column("File")
    shown = 0
    for name in names:
        file_name = settings.relative_name(prefix, name)
        if file_name is None:
            continue
        table.add_row(name, file_name)
        shown += 1

    console.print(table)
    click.echo(f"{shown} resource(s)")


@cli.command()
@click.argument("source")
@click.argument(
    "output_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option("--prefix", "-p", default="", help="Namespace prefix of the resources")
@click.option(
    "--file",
    "-f",
    "files",
    multiple=True,
    help="Extract only this file name (repeatable); all under prefix by default",
)
@click.option("--separator", default=".", show_default=True, help="Name separator")
@click.option(
    "--chunk-size",
    type=int,
    default=None,
    help="Bytes copied per read (overrides default)",
)
@click.option(
    "--stop-on-error/--continue-on-error",
    default=False,
    help="Stop at the first failed resource (default: continue)",
)
def extract(
    source: str,
    output_dir: Path,
    prefix: str,
    files: Tuple[str, ...],
    separator: str,
    chunk_size: Optional[int],
    stop_on_error: bool,
) -> None:
    """Extract resources from SOURCE into the existing OUTPUT_DIR."""
    overrides = {"chunk_size": chunk_size} if chunk_size is not None else {}
    settings = _settings_or_exit(
        separator=separator, stop_on_error=stop_on_error, **overrides
    )

    job = ExtractionJob(
        source=source,
        prefix=prefix,
        files=list(files) or None,
        output_directory=output_dir,
    )
    batch, ok = _run_job(job, settings)
    if batch is not None:
        _print_batch(batch)
    if not ok:
        sys.exit(1)
    click.echo(f"✅ {len(batch.files)} file(s) written to {output_dir}")


@cli.command()
@click.argument("source")
@click.argument("name")
@click.option("--separator", default=".", show_default=True, help="Name separator")
def show(source: str, name: str, separator: str) -> None:
    """Parse the JSON resource NAME from SOURCE and print it."""
    extractor = ResourceExtractor(_settings_or_exit(separator=separator))
    bundle = _open_or_exit(source, separator)
    try:
        result = extractor.load_object(bundle, name)
    finally:
        _close(bundle)

    if not result.success:
        click.echo(f"❌ [{result.error_kind.value}] {result.error_message}", err=True)
        sys.exit(1)
    console.print_json(data=result.value)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default="extraction_manifest.json",
    help="Manifest file path (default: extraction_manifest.json)",
)
@click.option(
    "--stop-on-error/--continue-on-error",
    default=None,
    help="Override the manifest's stop_on_error setting",
)
@click.pass_context
def run(ctx: click.Context, config: Path, stop_on_error: Optional[bool]) -> None:
    """Run every job in an extraction manifest."""
    try:
        manifest = ExtractionManifest.from_json(config)
    except FileNotFoundError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(1)

    settings = manifest.settings
    if stop_on_error is not None:
        settings = settings.model_copy(update={"stop_on_error": stop_on_error})
    if ctx.obj.get("log_level") is None:
        logging.getLogger().setLevel(settings.log_level)

    failures = 0
    for index, job in enumerate(manifest.jobs, start=1):
        label = job.description or f"{job.source} ({job.prefix or '*'})"
        click.echo(f"🔄 [{index}/{len(manifest.jobs)}] {label}")
        batch, ok = _run_job(job, settings)
        if batch is not None:
            _print_batch(batch)
        if not ok:
            failures += 1
            if settings.stop_on_error:
                break

    if failures:
        click.echo(f"❌ {failures} job(s) failed", err=True)
        sys.exit(1)
    click.echo(f"✅ {len(manifest.jobs)} job(s) complete")


@cli.command()
@click.argument("config_file", type=click.Path(path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a manifest file."""
    try:
        manifest = ExtractionManifest.from_json(config_file)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(1)

    click.echo("✅ Configuration is valid!")
    click.echo(f"  Separator: {manifest.settings.separator!r}")
    click.echo(f"  Stop on error: {manifest.settings.stop_on_error}")
    click.echo(f"\n🎯 Jobs ({len(manifest.jobs)}):")
    for job in manifest.jobs:
        click.echo(f"  • {job.source} -> {job.output_directory}")
        if job.files:
            click.echo(f"    Files: {', '.join(job.files)}")
        else:
            click.echo(f"    All resources under '{job.prefix}'")


if __name__ == "__main__":
    cli()
