import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from b2b_pricing.core.exceptions import OrderNotFoundError, PricingError
from b2b_pricing.database.connection import get_db
from b2b_pricing.dependencies.auth import is_admin, require_admin, require_auth
from b2b_pricing.models.user import User
from b2b_pricing.schemas.checkout import CheckoutRequest, OrderSnapshot
from b2b_pricing.schemas.order import OrderResponse, OrderStatusUpdate
from b2b_pricing.services.order_service import (
    get_order,
    list_orders,
    place_order,
    quote,
    reprice_order,
    update_order_status,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Checkout & Orders"])

PRICING_FAILED_DETAIL = "Unable to price order, please try again."


def _pricing_unavailable(exc: PricingError) -> HTTPException:
    # details stay in the log, never in the response
    logger.exception("Pricing failed: %s", exc)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=PRICING_FAILED_DETAIL,
    )


@router.post("/quote", response_model=OrderSnapshot)
def quote_cart(
    request: CheckoutRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    """Price the cart as checkout would, without placing an order."""
    try:
        return quote(db, user, request.items)
    except PricingError as exc:
        raise _pricing_unavailable(exc)


@router.post("/", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def checkout(
    request: CheckoutRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    if not request.items:
        raise HTTPException(status_code=400, detail="Cart is empty")
    try:
        return place_order(db, user, request.items, payment_method=request.payment_method)
    except PricingError as exc:
        raise _pricing_unavailable(exc)


@router.get("/", response_model=list[OrderResponse])
def my_orders(
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    if is_admin(user):
        return list_orders(db)
    return list_orders(db, user_id=str(user.id))


@router.get("/{order_id}", response_model=OrderResponse)
def order_detail(
    order_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    order = get_order(db, order_id)
    if not order or (order.user_id != str(user.id) and not is_admin(user)):
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.patch("/{order_id}/status", response_model=OrderResponse, dependencies=[Depends(require_admin)])
def change_status(order_id: str, update: OrderStatusUpdate, db: Session = Depends(get_db)):
    try:
        return update_order_status(db, order_id, update.status)
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")


@router.post(
    "/{order_id}/reprice",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def reprice(order_id: str, db: Session = Depends(get_db)):
    """Issue an amending order priced under today's rules."""
    try:
        return reprice_order(db, order_id)
    except OrderNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except PricingError as exc:
        raise _pricing_unavailable(exc)
