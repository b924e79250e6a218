from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, event, inspect
import datetime
from b2b_pricing.database.connection import Base
from b2b_pricing.core.exceptions import RuleLockedError


class PricingRule(Base):
    __tablename__ = "pricing_rules"

    id = Column(Integer, primary_key=True, index=True)
    rule_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    rule_type = Column(String, nullable=False)  # DISCOUNT, COMMISSION, MARKUP, SHIPPING
    calculation_type = Column(String, nullable=False)  # PERCENTAGE, FIXED_AMOUNT
    value = Column(Float, nullable=False)
    pipeline_definition = Column(String, default="DIRECT")
    target_role = Column(String, nullable=True)  # None = every buyer
    priority = Column(Integer, default=0, nullable=False)
    min_order_value = Column(Float, default=0.0, nullable=False)
    effective_from = Column(DateTime, nullable=False)
    effective_to = Column(DateTime, nullable=True)
    is_locked = Column(Boolean, default=False, nullable=False)
    supersedes_rule_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)


@event.listens_for(PricingRule, "before_update")
def _reject_locked_rule_update(mapper, connection, target):
    state = inspect(target)
    lock_history = state.attrs.is_locked.history
    if lock_history.has_changes():
        was_locked = bool(lock_history.deleted and lock_history.deleted[0])
    else:
        was_locked = bool(target.is_locked)

    if not was_locked:
        return

    for attr in state.attrs:
        if attr.history.has_changes():
            raise RuleLockedError(target.rule_id)
