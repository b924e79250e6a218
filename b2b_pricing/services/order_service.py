"""
Checkout and order persistence around the pricing engine.

A snapshot is computed exactly once per checkout and stored verbatim on the
order. Re-pricing never edits an order; it creates an amending one.
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from b2b_pricing.core.config import settings
from b2b_pricing.core.exceptions import OrderNotFoundError
from b2b_pricing.enums.commercial import OrderStatus, PaymentCategory
from b2b_pricing.models.order import Order
from b2b_pricing.models.user import User
from b2b_pricing.schemas.checkout import Buyer, CartLine, OrderSnapshot
from b2b_pricing.services.pricing_engine.rule_store import SqlRuleStore
from b2b_pricing.services.pricing_engine.snapshot import compute_snapshot

logger = logging.getLogger(__name__)


def _generate_order_id() -> str:
    return "ORD_" + uuid.uuid4().hex[:10].upper()


def quote(
    db: Session,
    user: User,
    cart: Sequence[CartLine],
    as_of: Optional[datetime] = None,
) -> OrderSnapshot:
    """Price a cart without creating an order."""
    return compute_snapshot(
        SqlRuleStore(db),
        cart,
        Buyer.from_user(user),
        as_of or datetime.utcnow(),
        settlement_mode=settings.DEFAULT_SETTLEMENT_MODE,
    )


def _new_order(
    user_id: str,
    business_name: Optional[str],
    cart: Sequence[CartLine],
    snapshot: OrderSnapshot,
    payment_method: Optional[str],
    amends_order_id: Optional[str] = None,
) -> Order:
    return Order(
        order_id=_generate_order_id(),
        user_id=user_id,
        business_name=business_name,
        items=[line.model_dump(mode="json") for line in cart],
        total_amount=snapshot.final_total,
        commission_value=snapshot.commission_total,
        gaddi_id=snapshot.pipeline.gaddi_id,
        payment_method=payment_method,
        status=OrderStatus.PENDING.value,
        snapshot_data=snapshot.model_dump(mode="json"),
        amends_order_id=amends_order_id,
    )


def place_order(
    db: Session,
    user: User,
    cart: Sequence[CartLine],
    payment_method: Optional[PaymentCategory] = None,
    as_of: Optional[datetime] = None,
) -> Order:
    snapshot = quote(db, user, cart, as_of=as_of)

    order = _new_order(
        user_id=str(user.id),
        business_name=user.business_name,
        cart=cart,
        snapshot=snapshot,
        payment_method=payment_method.value if payment_method else None,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info(
        "Placed order %s for user %s, total %.2f",
        order.order_id,
        order.user_id,
        order.total_amount,
    )
    return order


def get_order(db: Session, order_id: str) -> Optional[Order]:
    return db.query(Order).filter(Order.order_id == order_id).first()


def list_orders(db: Session, user_id: Optional[str] = None) -> List[Order]:
    query = db.query(Order)
    if user_id is not None:
        query = query.filter(Order.user_id == user_id)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def update_order_status(db: Session, order_id: str, status: OrderStatus) -> Order:
    order = get_order(db, order_id)
    if not order:
        raise OrderNotFoundError(order_id)

    order.status = status.value
    db.commit()
    db.refresh(order)
    return order


def reprice_order(
    db: Session,
    order_id: str,
    as_of: Optional[datetime] = None,
) -> Order:
    """
    Price an existing order's cart again under the rules in force at
    ``as_of`` and record the result as a new order amending the original.

    The buyer's current pipeline is used; the original order keeps the
    pipeline it was placed with.
    """
    original = get_order(db, order_id)
    if not original:
        raise OrderNotFoundError(order_id)

    user = db.query(User).filter(User.id == int(original.user_id)).first()
    if not user:
        raise OrderNotFoundError(order_id)

    cart = [CartLine.model_validate(item) for item in original.items or []]
    snapshot = quote(db, user, cart, as_of=as_of)

    amendment = _new_order(
        user_id=original.user_id,
        business_name=original.business_name,
        cart=cart,
        snapshot=snapshot,
        payment_method=original.payment_method,
        amends_order_id=original.order_id,
    )
    db.add(amendment)
    db.commit()
    db.refresh(amendment)
    logger.info(
        "Re-priced order %s as %s: %.2f -> %.2f",
        original.order_id,
        amendment.order_id,
        original.total_amount,
        amendment.total_amount,
    )
    return amendment
