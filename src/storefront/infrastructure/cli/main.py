import click
import uvicorn

from storefront.infrastructure.bootstrap import container
from storefront.infrastructure.cli.catalog_commands import catalog_list
from storefront.infrastructure.cli.supplier_commands import (
    supplier_balance,
    supplier_cancel,
    supplier_refill,
    supplier_status,
)
from storefront.infrastructure.logging import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override the configured log level.")
def cli(log_level: str | None) -> None:
    """Storefront — social-media engagement shop with Pix checkout"""
    settings = container().settings
    configure_logging(log_level or settings.log_level, settings.json_logs)


@cli.group()
def catalog() -> None:
    """Browse the service catalog."""


@cli.group()
def supplier() -> None:
    """Query the supplier panel."""


@cli.command("serve")
@click.option("--host", default="127.0.0.1", help="Interface to bind.")
@click.option("--port", default=8000, type=int, help="Port to listen on.")
def serve(host: str, port: int) -> None:
    """Run the HTTP API (storefront + payment webhook)."""
    uvicorn.run(
        "storefront.infrastructure.api.app:build_app",
        factory=True,
        host=host,
        port=port,
        log_config=None,
    )


# Register subcommands
catalog.add_command(catalog_list)
supplier.add_command(supplier_balance)
supplier.add_command(supplier_cancel)
supplier.add_command(supplier_refill)
supplier.add_command(supplier_status)
