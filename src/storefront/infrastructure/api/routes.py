"""FastAPI routes for the storefront: catalog, cart, checkout, orders and
the Pix payment webhook."""

from __future__ import annotations

import hmac

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from storefront.application.browse_catalog import BrowseCatalogHandler
from storefront.application.cart import (
    AddToCartHandler,
    CreateCartHandler,
    RemoveFromCartHandler,
    ShowCartHandler,
    UpdateCartQuantityHandler,
    load_cart,
)
from storefront.application.checkout import (
    CloseCheckoutHandler,
    ConfirmCheckoutHandler,
    StartCheckoutHandler,
    StepBackHandler,
    SubmitCustomerHandler,
)
from storefront.application.dto import CartDTO, CatalogDTO, CheckoutDTO, OrderDTO, ServiceDTO
from storefront.application.process_payment_event import ProcessPaymentEventHandler
from storefront.application.refresh_catalog import RefreshCatalogHandler
from storefront.application.show_order import ListOrdersHandler, ShowOrderHandler
from storefront.application.supplier import ShowBalanceHandler
from storefront.domain.model.payment_event import PaymentEvent
from storefront.domain.service.catalog_mapper import CATEGORIES, PLATFORMS
from storefront.infrastructure.api.schemas import (
    AddToCartRequest,
    BalanceResponse,
    CustomerRequest,
    FilterOption,
    FiltersResponse,
    PixWebhookRequest,
    UpdateQuantityRequest,
    WebhookResponse,
)
from storefront.infrastructure.bootstrap import Container


def get_container(request: Request) -> Container:
    return request.app.state.container


def require_admin_token(
    x_admin_token: str = Header(default=""),
    c: Container = Depends(get_container),
) -> None:
    expected = c.settings.admin_token
    if not expected or not hmac.compare_digest(x_admin_token.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Invalid admin token")


# ---------------------------------------------------------------------------
# Catalog Router
# ---------------------------------------------------------------------------
catalog_router = APIRouter(prefix="/catalog", tags=["catalog"])


@catalog_router.get("", response_model=list[ServiceDTO])
async def list_services(
    search: str = "",
    category: str = "all",
    platform: str = "all",
    c: Container = Depends(get_container),
) -> list[ServiceDTO]:
    """List the services on sale, optionally filtered."""
    return BrowseCatalogHandler(c.catalog_repo).handle(search, category, platform)


@catalog_router.post("/refresh", response_model=CatalogDTO)
async def refresh_catalog(c: Container = Depends(get_container)) -> CatalogDTO:
    """Reload the catalog from the supplier (keeps the old one on failure)."""
    return await RefreshCatalogHandler(c.catalog_repo, c.supplier, c.timeout).handle()


@catalog_router.get("/filters", response_model=FiltersResponse)
async def list_filters() -> FiltersResponse:
    return FiltersResponse(
        categories=[FilterOption(id=i, name=n) for i, n in CATEGORIES],
        platforms=[FilterOption(id=i, name=n) for i, n in PLATFORMS],
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["cart"])


@cart_router.post("", status_code=201, response_model=CartDTO)
async def create_cart(c: Container = Depends(get_container)) -> CartDTO:
    return CreateCartHandler(c.cart_repo).handle()


@cart_router.get("/{cart_id}", response_model=CartDTO)
async def show_cart(cart_id: str, c: Container = Depends(get_container)) -> CartDTO:
    return ShowCartHandler(c.cart_repo).handle(cart_id)


@cart_router.post("/{cart_id}/items", response_model=CartDTO)
async def add_to_cart(
    cart_id: str, body: AddToCartRequest, c: Container = Depends(get_container)
) -> CartDTO:
    handler = AddToCartHandler(c.cart_repo, c.catalog_repo)
    return handler.handle(cart_id, body.service_id, body.quantity, body.link)


@cart_router.patch("/{cart_id}/items/{service_id}", response_model=CartDTO)
async def update_quantity(
    cart_id: str,
    service_id: str,
    body: UpdateQuantityRequest,
    c: Container = Depends(get_container),
) -> CartDTO:
    handler = UpdateCartQuantityHandler(c.cart_repo)
    return handler.handle(cart_id, service_id, body.quantity, body.link)


@cart_router.delete("/{cart_id}/items/{service_id}", response_model=CartDTO)
async def remove_from_cart(
    cart_id: str,
    service_id: str,
    link: str | None = None,
    c: Container = Depends(get_container),
) -> CartDTO:
    return RemoveFromCartHandler(c.cart_repo).handle(cart_id, service_id, link)


# ---------------------------------------------------------------------------
# Checkout (nested under the cart)
# ---------------------------------------------------------------------------
@cart_router.post("/{cart_id}/checkout", response_model=CheckoutDTO)
async def start_checkout(cart_id: str, c: Container = Depends(get_container)) -> CheckoutDTO:
    return StartCheckoutHandler(c.cart_repo).handle(cart_id)


@cart_router.post("/{cart_id}/checkout/customer", response_model=CheckoutDTO)
async def submit_customer(
    cart_id: str, body: CustomerRequest, c: Container = Depends(get_container)
) -> CheckoutDTO:
    return SubmitCustomerHandler(c.cart_repo).handle(cart_id, body.to_domain())


@cart_router.post("/{cart_id}/checkout/back", response_model=CheckoutDTO)
async def checkout_back(cart_id: str, c: Container = Depends(get_container)) -> CheckoutDTO:
    return StepBackHandler(c.cart_repo).handle(cart_id)


@cart_router.post("/{cart_id}/checkout/confirm", response_model=CheckoutDTO)
async def confirm_checkout(cart_id: str, c: Container = Depends(get_container)) -> CheckoutDTO:
    """Build the order and generate one Pix QR code per item."""
    handler = ConfirmCheckoutHandler(c.cart_repo, c.order_repo, c.payment_gateway, c.timeout)
    return await handler.handle(cart_id)


@cart_router.post("/{cart_id}/checkout/close", response_model=CheckoutDTO)
async def close_checkout(cart_id: str, c: Container = Depends(get_container)) -> CheckoutDTO:
    return CloseCheckoutHandler(c.cart_repo).handle(cart_id)


# ---------------------------------------------------------------------------
# Order history of a cart
# ---------------------------------------------------------------------------
@cart_router.get("/{cart_id}/orders", response_model=list[OrderDTO])
async def list_cart_orders(
    cart_id: str,
    status: str | None = None,
    c: Container = Depends(get_container),
) -> list[OrderDTO]:
    load_cart(c.cart_repo, cart_id)
    return ListOrdersHandler(c.order_repo).handle(status, cart_id=cart_id)


@cart_router.get("/{cart_id}/orders/{order_id}", response_model=OrderDTO)
async def show_cart_order(
    cart_id: str, order_id: int, c: Container = Depends(get_container)
) -> OrderDTO:
    return ShowOrderHandler(c.order_repo).handle(order_id, cart_id=cart_id)


# ---------------------------------------------------------------------------
# Orders across all carts (back office)
# ---------------------------------------------------------------------------
order_router = APIRouter(
    prefix="/orders", tags=["orders"], dependencies=[Depends(require_admin_token)]
)


@order_router.get("", response_model=list[OrderDTO])
async def list_orders(
    status: str | None = None, c: Container = Depends(get_container)
) -> list[OrderDTO]:
    return ListOrdersHandler(c.order_repo).handle(status)


@order_router.get("/{order_id}", response_model=OrderDTO)
async def show_order(order_id: int, c: Container = Depends(get_container)) -> OrderDTO:
    return ShowOrderHandler(c.order_repo).handle(order_id)


# ---------------------------------------------------------------------------
# Supplier balance (advisory)
# ---------------------------------------------------------------------------
balance_router = APIRouter(tags=["supplier"])


@balance_router.get("/balance", response_model=BalanceResponse)
async def show_balance(c: Container = Depends(get_container)) -> BalanceResponse:
    balance = await ShowBalanceHandler(c.supplier, c.timeout).handle()
    return BalanceResponse(balance=balance.balance, currency=balance.currency)


# ---------------------------------------------------------------------------
# Webhook Router (server-to-server only)
# ---------------------------------------------------------------------------
webhook_router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@webhook_router.post("/pix", response_model=WebhookResponse)
async def pix_webhook(
    body: PixWebhookRequest,
    x_webhook_token: str = Header(default=""),
    c: Container = Depends(get_container),
) -> WebhookResponse:
    """Payment confirmation pushed by the Pix gateway."""
    token = body.token or x_webhook_token
    if not c.payment_gateway.verify_webhook_token(token):
        raise HTTPException(status_code=401, detail="Invalid webhook token")

    event = PaymentEvent(
        event_type=body.event,
        transaction_id=body.transaction.id,
        payment_status=body.transaction.status,
    )
    handler = ProcessPaymentEventHandler(c.order_repo, c.supplier, c.timeout)
    outcome = await handler.handle(event)
    return WebhookResponse(
        status=outcome.action, order_id=outcome.order_id, order_status=outcome.status
    )
