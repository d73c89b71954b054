"""CLI commands for the service catalog."""

from __future__ import annotations

import asyncio

import click

from storefront.application.browse_catalog import BrowseCatalogHandler
from storefront.application.refresh_catalog import RefreshCatalogHandler
from storefront.infrastructure.bootstrap import container


@click.command("list")
@click.option("--search", default="", help="Text to look for in name/description.")
@click.option("--category", default="all", help="Category id (e.g. likes, views).")
@click.option("--platform", default="all", help="Platform id (e.g. instagram, tiktok).")
def catalog_list(search: str, category: str, platform: str) -> None:
    """Fetch the supplier catalog and list the services on sale."""
    c = container()
    result = asyncio.run(RefreshCatalogHandler(c.catalog_repo, c.supplier, c.timeout).handle())
    if result.error:
        raise click.ClickException(result.error)

    services = BrowseCatalogHandler(c.catalog_repo).handle(search, category, platform)
    if not services:
        click.echo("No services found.")
        return

    click.echo(f"{'ID':<12} {'Platform':<10} {'Category':<12} {'Qty (mil)':>10} {'Price':>12}  Name")
    click.echo("-" * 90)
    for s in services:
        bounds = f"{s.min_quantity}-{s.max_quantity}"
        star = "*" if s.popular else " "
        click.echo(
            f"{s.id:<12} {s.platform:<10} {s.category:<12} {bounds:>10} {s.price:>12} {star}{s.name}"
        )
