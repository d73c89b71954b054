"""CLI commands for the supplier account."""

from __future__ import annotations

import asyncio

import click

from storefront.application.supplier import (
    CancelSupplierOrdersHandler,
    CheckSupplierOrderHandler,
    RequestRefillHandler,
    ShowBalanceHandler,
)
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import container


@click.command("balance")
def supplier_balance() -> None:
    """Show the supplier account balance."""
    c = container()
    try:
        balance = asyncio.run(ShowBalanceHandler(c.supplier, c.timeout).handle())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Balance: {balance.balance} {balance.currency}")


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Supplier order ID.")
def supplier_status(order_id: int) -> None:
    """Show the supplier-side status of a placed order."""
    c = container()
    try:
        status = asyncio.run(CheckSupplierOrderHandler(c.supplier, c.timeout).handle(order_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id}  (status={status.status})")
    click.echo(f"Start count: {status.start_count or '-'}")
    click.echo(f"Remains:     {status.remains or '-'}")
    click.echo(f"Charge:      {status.charge or '-'} {status.currency}")


@click.command("refill")
@click.option("--id", "order_id", required=True, type=int, help="Supplier order ID.")
def supplier_refill(order_id: int) -> None:
    """Request a refill for a placed order."""
    c = container()
    try:
        refill_id = asyncio.run(RequestRefillHandler(c.supplier, c.timeout).handle(order_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Refill #{refill_id} requested for order #{order_id}.")


@click.command("cancel")
@click.option(
    "--id", "order_ids", required=True, multiple=True, type=int,
    help="Supplier order ID (repeat for several).",
)
def supplier_cancel(order_ids: tuple[int, ...]) -> None:
    """Request cancellation of placed orders."""
    c = container()
    try:
        results = asyncio.run(CancelSupplierOrdersHandler(c.supplier, c.timeout).handle(list(order_ids)))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for result in results:
        if result.accepted:
            click.echo(f"Order #{result.external_order_id}: cancellation requested.")
        else:
            click.echo(f"Order #{result.external_order_id}: {result.error}")
