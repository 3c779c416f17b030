"""Command line interface for browsing pending package submissions."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping, Optional

import typer

from pullscout.catalog.cache import CatalogCache
from pullscout.config import get_settings
from pullscout.ingest.github_api import ListError
from pullscout.ingest.models import CatalogEntry
from pullscout.pipeline import Request, build_cache, run

app = typer.Typer(help="Browse package recipes proposed in open pull requests")


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")


def _open_cache(cache_path: Optional[Path], timeout: Optional[float]) -> CatalogCache:
    updates = {}
    if cache_path is not None:
        updates["cache_path"] = cache_path
    if timeout is not None:
        updates["aggregate_timeout"] = timeout
    settings = get_settings().model_copy(update=updates)
    return build_cache(settings)


def _write_output(entries: Mapping[str, CatalogEntry], as_json: bool, output: Optional[Path]) -> None:
    if as_json or output:
        payload = json.dumps({name: entry.model_dump(mode="json") for name, entry in entries.items()}, indent=2)
        if output:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(payload, encoding="utf-8")
            typer.secho(f"{len(entries)} entries written to {output}", fg=typer.colors.GREEN)
        else:
            typer.echo(payload)
        return

    for name in sorted(entries):
        entry = entries[name]
        date = entry.date.date().isoformat() if entry.date else "-"
        typer.echo(f"{name:<30} {date:<10} {entry.url}")
        typer.echo(f"    {entry.description.text}")


def _serve(
    request: Request,
    cache_path: Optional[Path],
    timeout: Optional[float],
    as_json: bool,
    output: Optional[Path],
    verbose: bool,
) -> None:
    configure_logging(verbose)
    cache = _open_cache(cache_path, timeout)
    try:
        entries = run(request, cache)
    except ListError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    _write_output(entries, as_json, output)


@app.command("list")
def list_entries(
    cache_path: Optional[Path] = typer.Option(None, help="Catalog cache file"),
    timeout: Optional[float] = typer.Option(None, help="Seconds to wait for diffs when the cache is empty"),
    as_json: bool = typer.Option(False, "--json/--table", help="Output format"),
    output: Optional[Path] = typer.Option(None, help="Optional path to dump JSON entries"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Show cached entries, computing them first if the cache is empty."""
    _serve(Request.LIST, cache_path, timeout, as_json, output, verbose)


@app.command()
def refresh(
    cache_path: Optional[Path] = typer.Option(None, help="Catalog cache file"),
    timeout: Optional[float] = typer.Option(None, help="Seconds to wait for diffs"),
    as_json: bool = typer.Option(False, "--json/--table", help="Output format"),
    output: Optional[Path] = typer.Option(None, help="Optional path to dump JSON entries"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Recompute the catalog from the currently open submissions."""
    _serve(Request.REFRESH, cache_path, timeout, as_json, output, verbose)


@app.command()
def show(
    package: str = typer.Argument(..., help="Package name"),
    cache_path: Optional[Path] = typer.Option(None, help="Catalog cache file"),
) -> None:
    """Print the recipe and links of one cached entry."""
    cache = _open_cache(cache_path, None)
    entry = cache.get(package)
    if entry is None:
        typer.secho(f"No cached entry for {package}; run `refresh` first.", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(entry.model_dump(mode="json"), indent=2))


if __name__ == "__main__":  # pragma: no cover
    app()
