from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, JSON, event, inspect

from b2b_pricing.database.connection import Base
from b2b_pricing.core.exceptions import SnapshotImmutableError

# Columns written once from the pricing snapshot at order creation.
SNAPSHOT_COLUMNS = ("snapshot_data", "total_amount", "commission_value")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String, unique=True, index=True)  # e.g. ORD_1A2B3C4D5E
    user_id = Column(String, nullable=False, index=True)
    business_name = Column(String, nullable=True)
    items = Column(JSON, default=list)
    total_amount = Column(Float, nullable=False)
    commission_value = Column(Float, default=0.0, nullable=False)
    gaddi_id = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    status = Column(String, default="PENDING", index=True)
    snapshot_data = Column(JSON, nullable=False)
    amends_order_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


@event.listens_for(Order, "before_update")
def _reject_snapshot_rewrite(mapper, connection, target):
    state = inspect(target)
    for column in SNAPSHOT_COLUMNS:
        if state.attrs[column].history.has_changes():
            raise SnapshotImmutableError(target.order_id)
